"""Main osm-tags-transform API.

Provides the high-level TagsTransform class that wires reader, script,
processor and writer together for one run.
"""
import time
from pathlib import Path
from typing import Any, Dict, Optional, Union

from osm_transform.config import ProcessingConfig
from osm_transform.io.reader import DEFAULT_BATCH_SIZE, OSMReader
from osm_transform.io.writer import OSMWriter
from osm_transform.processing.buffer import OutputBuffer
from osm_transform.processing.processor import ObjectProcessor
from osm_transform.scripting.binding import ScriptBinding
from osm_transform.scripting.runtime import ScriptRuntime
from osm_transform.utils.verbose import VerboseOutput

MBYTE = 1024 * 1024


class TagsTransform:
    """Run a processing script over an OSM file.

    The script is loaded and its callbacks are bound in the constructor, so
    configuration errors surface before any input is opened.

    Args:
        script_path: Path to the Python processing script
        config: Processing configuration (defaults: no geometry, copy
            untagged objects, ``flex_mem`` index)
        verbose: Callable receiving progress messages
    """

    def __init__(self, script_path: Union[str, Path],
                 config: Optional[ProcessingConfig] = None,
                 verbose: Optional[VerboseOutput] = None):
        self.config = config or ProcessingConfig()
        self.vout = verbose or VerboseOutput(False)

        self.runtime = ScriptRuntime()
        self.runtime.load_and_run(script_path)
        self.binding = ScriptBinding.from_runtime(self.runtime)

    def _create_processor(self) -> ObjectProcessor:
        return ObjectProcessor(self.runtime, self.binding, self.config)

    def run(self, input_file: Union[str, Path],
            output_file: Optional[Union[str, Path]] = None,
            output_format: Optional[str] = None,
            overwrite: bool = False,
            batch_size: int = DEFAULT_BATCH_SIZE) -> Dict[str, Any]:
        """Transform ``input_file`` into ``output_file``.

        Returns:
            Result dict with metadata and per-kind statistics

        Raises:
            FileNotFoundError: If the input file does not exist
            FileExistsError: If the output exists and overwrite is False
            TransformError: On any fatal script or processing error
        """
        start_time = time.time()
        vout = self.vout

        if self.config.geometry_enabled:
            vout("Geometry processing enabled. bbox will be available")
            vout(f"Using index type '{self.config.index_type}'")
        else:
            vout("No geometry processing. bbox will not be available")

        processor = self._create_processor()
        try:
            with OSMReader(input_file, batch_size=batch_size) as reader:
                vout(f"Writing into '{output_file or '(stdout)'}'.")
                writer = OSMWriter(output_file, output_format, overwrite=overwrite)
                writer.set_header(reader.header)

                vout(f"Start processing '{input_file}'...")
                try:
                    for batch in reader.batches():
                        out_buffer = OutputBuffer()
                        processor.set_buffer(out_buffer)
                        for feature in batch:
                            processor.apply(feature)
                        writer.write(out_buffer)
                finally:
                    writer.close()
            vout("Done processing.")

            memory = processor.memory_used()
        finally:
            if processor.index is not None:
                processor.index.close()

        for name, used in memory.items():
            label = name.replace('_', ' ')
            vout(f"Memory used for {label}: {used // MBYTE}MBytes")

        processing_time = time.time() - start_time
        stats = processor.stats()
        for kind, counts in stats.items():
            vout(f"{kind.capitalize()}s: " +
                 ", ".join(f"{key}={value}" for key, value in counts.items()))
        return {
            'metadata': {
                'input_file': str(input_file),
                'output_file': str(output_file) if output_file else None,
                'output_format': writer.output_format,
                'geometry': self.config.geometry.value,
                'untagged': self.config.untagged.value,
                'index_type': self.config.index_type,
                'callbacks': self.binding.bound_names,
                'processing_time_seconds': processing_time,
                'elements': {
                    'input': sum(s['input'] for s in stats.values()),
                    'output': writer.elements_written,
                },
                'memory_bytes': memory,
            },
            'stats': stats,
        }
