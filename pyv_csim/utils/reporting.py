from __future__ import annotations
import json
from pathlib import Path
from typing import Dict, Any
from ..config import CsimConfig
from ..runtime.cache import CacheModel
from . import viz


def format_summary(hits: int, misses: int, evictions: int) -> str:
    return f"hits:{hits} misses:{misses} evictions:{evictions}"


def print_summary(hits: int, misses: int, evictions: int, results_file: str = ".csim_results"):
    """Prints the summary line and persists `H M E` for grading scripts."""
    print(format_summary(hits, misses, evictions))
    if results_file:
        with open(results_file, "w") as f:
            f.write(f"{hits} {misses} {evictions}\n")


def _rate(part: int, whole: int) -> float:
    return part / whole if whole else 0.0


def generate_report_json(model: CacheModel, config: CsimConfig) -> Dict[str, Any]:
    """Generates a JSON-compatible dictionary describing a finished run."""
    per_set = model.set_stats()
    for entry in per_set:
        entry["hit_rate"] = round(_rate(entry["hits"], entry["hits"] + entry["misses"]), 4)

    return {
        "trace": config.trace,
        "geometry": {
            "s": model.set_bits,
            "E": model.associativity,
            "b": model.block_bits,
            "num_sets": model.num_sets,
            "block_size": model.block_size,
            "size_bytes": model.size_bytes,
        },
        "accesses": model.accesses,
        "hits": model.hits,
        "misses": model.misses,
        "evictions": model.evictions,
        "hit_rate": f"{_rate(model.hits, model.accesses):.2%}",
        "miss_rate": f"{_rate(model.misses, model.accesses):.2%}",
        "sets_touched": len(per_set),
        "per_set": per_set,
    }


def generate_report(model: CacheModel, config: CsimConfig):
    """Writes report.json and report.html into config.report_dir and prints the ASCII chart."""
    report_data = generate_report_json(model, config)
    output_dir = Path(config.report_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    with open(output_dir / "report.json", "w") as f:
        json.dump(report_data, f, indent=4)

    viz.export_set_chart(report_data['per_set'], str(output_dir / "report.html"))
    print(viz.export_set_chart_ascii(report_data['per_set']))

    print(f"\nReports generated in {output_dir.absolute()}")
    print(f"Hit rate: {report_data['hit_rate']} over {report_data['accesses']} accesses "
          f"({report_data['sets_touched']} of {model.num_sets} sets touched)")
