"""Main pipeline orchestration module."""

import logging
from pathlib import Path
from typing import Dict, Any, Union, Optional, Literal, List, Sequence
import psutil
import time

from molsep.core.types import ValidationResult
from molsep.core.exceptions import ValidationError
from molsep.utils.config import validate_configuration_schema
from molsep.modules.assignment import get_strategy
from molsep.modules.graph_io import read_graph, save_graph, STREAM_PATH
from molsep.modules.separation import separate_molecules
from molsep.modules.reconstruction import build_molecule_graph
from molsep.modules.statistics import summarize_separation, write_separation_summary


logger = logging.getLogger(__name__)


def run_molecule_separation(
    input_files: Sequence[Union[str, Path]],
    config: Dict[str, Any],
    output_path: Optional[Union[str, Path]] = None,
    stats_file: Optional[Union[str, Path]] = None,
    validate_inputs: bool = True,
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO",
    log_file: Optional[Path] = None
) -> Dict[str, Any]:
    """
    Separate the molecules of a barcode overlap graph.

    Loads the input graph, builds a molecule table for every barcode,
    generates the molecule-separated graph and writes it out. The graph is
    not written if any earlier stage fails.

    Args:
        input_files: Graph TSV files ("-" for standard input)
        config: Complete pipeline configuration dictionary
        output_path: Output graph file (standard output when None)
        stats_file: Optional per-barcode statistics TSV
        validate_inputs: Whether to validate inputs before processing
        log_level: Logging verbosity level
        log_file: Optional log file

    Returns:
        Dictionary containing pipeline results and metadata
    """
    setup_logging(log_level, log_file)

    strategy = config.get("separation", {}).get("strategy", "bc")
    threads = config.get("resources", {}).get("threads", 1)
    chunk_size = config.get("resources", {}).get("chunk_size")

    start_time = time.time()
    results = {
        "start_time": start_time,
        "strategy": strategy,
        "input_files": [str(path) for path in input_files]
    }

    try:
        # unsupported strategies are rejected before anything is read
        get_strategy(strategy)

        # Validation stage
        if validate_inputs:
            logger.debug("Validating inputs...")
            validation_result = validate_pipeline_inputs(input_files, config)
            for warning in validation_result.warnings:
                logger.warning(warning)
            if not validation_result.is_valid:
                raise ValidationError(
                    f"Input validation failed: {'; '.join(validation_result.errors)}",
                    errors=validation_result.errors,
                    stage="validation"
                )

        # Loading stage
        logger.info("Loading graph")
        stage_time = time.time()
        graph = read_graph(input_files)
        results["n_vertices"] = graph.n_vertices
        results["n_edges"] = graph.n_edges
        log_stage_resources(
            f"Loaded graph with {graph.n_vertices} vertices and {graph.n_edges} edges", stage_time
        )

        # Separation stage
        logger.info(f"Separating molecules using strategy '{strategy}'")
        stage_time = time.time()
        molecule_table = separate_molecules(
            graph, strategy=strategy, threads=threads, chunk_size=chunk_size
        )
        log_stage_resources("Finished molecule separation", stage_time)

        # Reconstruction stage
        logger.info("Generating molecule overlap graph")
        stage_time = time.time()
        molecule_graph = build_molecule_graph(graph, molecule_table)
        results["n_molecules"] = molecule_graph.n_vertices
        results["n_molecule_edges"] = molecule_graph.n_edges
        log_stage_resources("Generated new graph", stage_time)

        barcodes, summary = summarize_separation(graph, molecule_table, molecule_graph)
        results["summary"] = summary

        # Output stage; the molecule graph is the last thing written
        stage_time = time.time()
        if stats_file:
            write_separation_summary(barcodes, stats_file)
            results["stats_file"] = str(stats_file)
        save_graph(molecule_graph, output_path)
        results["output_path"] = str(output_path) if output_path else STREAM_PATH
        log_stage_resources("Printed graph", stage_time, level=logging.DEBUG)

        end_time = time.time()
        results["end_time"] = end_time
        results["runtime_seconds"] = end_time - start_time
        logger.info(f"Molecule separation completed in {end_time - start_time:.1f} seconds")

        return results

    except Exception as e:
        end_time = time.time()
        results["end_time"] = end_time
        results["runtime_seconds"] = end_time - start_time
        results["error"] = str(e)

        logger.error(f"Molecule separation failed after {end_time - start_time:.1f} seconds: {e}")
        raise


def validate_pipeline_inputs(
    input_files: Sequence[Union[str, Path]],
    config: Dict[str, Any]
) -> ValidationResult:
    """
    Validation of pipeline inputs.

    Args:
        input_files: Graph files to read
        config: Pipeline configuration

    Returns:
        ValidationResult with validation status and details
    """
    errors = []
    warnings = []
    details = {}

    if not input_files:
        errors.append("missing file operand")

    missing: List[str] = []
    for path in input_files:
        if str(path) == STREAM_PATH:
            continue
        path = Path(path)
        if not path.exists():
            missing.append(str(path))
        elif not path.is_file():
            errors.append(f"Input path is not a file: {path}")
    if missing:
        errors.append(f"Input files do not exist: {', '.join(missing)}")
    details["n_input_files"] = len(input_files)

    config_validation = validate_configuration_schema(config)
    if not config_validation.is_valid:
        errors.extend(config_validation.errors)

    memory_gb = psutil.virtual_memory().total / (1024 ** 3)
    if memory_gb < 4:
        warnings.append(f"Low system memory: {memory_gb:.1f}GB")
    details["system_memory_gb"] = memory_gb

    return ValidationResult(
        is_valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
        details=details
    )


def memory_usage_gb() -> float:
    """Resident memory of the current process in GB."""
    return psutil.Process().memory_info().rss / (1024 ** 3)


def log_stage_resources(message: str, stage_start: float, level: int = logging.INFO) -> None:
    """Log a stage completion with elapsed time and memory usage."""
    logger.log(
        level,
        f"{message} in sec: {time.time() - stage_start:.3f}, "
        f"memory usage: {memory_usage_gb():.3f}GB"
    )


def setup_logging(level: str, log_file: Optional[Path] = None) -> None:
    """
    Setup logging configuration.

    Args:
        level: Logging level
        log_file: Optional log file path
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_file) if log_file else logging.NullHandler()
        ]
    )
