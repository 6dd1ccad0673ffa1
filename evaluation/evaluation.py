#!/usr/bin/env python3
"""
Evaluation runner for the Huffman text codec.

This evaluation script:
- Runs every sample of a text corpus through compress, decompress and verify
- Collects per-sample results (verified flag, bit counts, compression ratio)
- Generates a structured JSON report with environment metadata

Run with:
    python evaluation/evaluation.py [options]
"""
import sys
import json
import uuid
import platform
import subprocess
from datetime import datetime
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from huffman_core import HuffmanError
from huffman_service import HuffmanService


SAMPLE_CORPUS = [
    ("empty", ""),
    ("single_symbol", "aaaa"),
    ("concrete_scenario", "abacabad"),
    ("whitespace", "a b"),
    ("all_distinct", "abcdefghij"),
    ("mixed", "Hello, World! 123 -- huffman_coding (v2)?"),
    ("pangram", "the quick brown fox jumps over the lazy dog"),
]


def generate_run_id():
    """Generate a short unique run ID."""
    return uuid.uuid4().hex[:8]


def get_git_info():
    """Get git commit and branch information."""
    git_info = {"git_commit": "unknown", "git_branch": "unknown"}
    for key, cmd in (
        ("git_commit", ["git", "rev-parse", "HEAD"]),
        ("git_branch", ["git", "rev-parse", "--abbrev-ref", "HEAD"]),
    ):
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                cwd=str(PROJECT_ROOT),
                timeout=5
            )
        except (OSError, subprocess.SubprocessError):
            continue
        if result.returncode == 0:
            value = result.stdout.strip()
            git_info[key] = value[:8] if key == "git_commit" else value

    return git_info


def get_environment_info():
    """Collect environment information for the report."""
    git_info = get_git_info()

    return {
        "python_version": platform.python_version(),
        "platform": platform.platform(),
        "os": platform.system(),
        "os_release": platform.release(),
        "architecture": platform.machine(),
        "hostname": platform.node(),
        "git_commit": git_info["git_commit"],
        "git_branch": git_info["git_branch"],
    }


def load_samples(input_file=None):
    """Built-in corpus plus one sample per non-empty line of ``input_file``."""
    samples = list(SAMPLE_CORPUS)
    if input_file:
        with open(input_file, encoding="utf-8") as f:
            for lineno, line in enumerate(f, start=1):
                line = line.rstrip("\r\n")
                if line:
                    samples.append((f"{Path(input_file).name}:{lineno}", line))
    return samples


def evaluate_sample(service, name, text):
    """
    Run one sample through the codec.

    Args:
        service: The HuffmanService to use
        name: Label for this sample
        text: The input string

    Returns:
        dict with the sample's outcome
    """
    try:
        report = service.run(text)
    except HuffmanError as e:
        return {
            "name": name,
            "outcome": "error",
            "error": f"{type(e).__name__}: {e}",
        }

    return {
        "name": name,
        "outcome": "passed" if report.verified else "failed",
        "symbols": len(text),
        "distinct_symbols": len(report.frequencies),
        "original_bits": report.original_bits,
        "encoded_bits": report.encoded_bits,
        "compression_ratio": round(report.compression_ratio, 6),
    }


def run_evaluation(samples, service=None):
    """
    Run the codec over every sample.

    Returns dict with per-sample results and a summary.
    """
    if service is None:
        service = HuffmanService()

    print(f"\n{'=' * 60}")
    print("HUFFMAN CODEC EVALUATION")
    print(f"{'=' * 60}")

    results = [evaluate_sample(service, name, text) for name, text in samples]

    for result in results:
        status_icon = {
            "passed": "✅",
            "failed": "❌",
            "error": "💥",
        }.get(result["outcome"], "❓")
        detail = result.get("error") or f"ratio {result['compression_ratio']:.3f}"
        print(f"  {status_icon} {result['name']}: {result['outcome']} ({detail})")

    passed = sum(1 for r in results if r["outcome"] == "passed")
    failed = sum(1 for r in results if r["outcome"] == "failed")
    errors = sum(1 for r in results if r["outcome"] == "error")
    original_bits = sum(r.get("original_bits", 0) for r in results)
    encoded_bits = sum(r.get("encoded_bits", 0) for r in results)

    summary = {
        "total": len(results),
        "passed": passed,
        "failed": failed,
        "errors": errors,
        "original_bits": original_bits,
        "encoded_bits": encoded_bits,
        "overall_ratio": round(original_bits / encoded_bits, 6) if encoded_bits > 0 else 1.0,
    }

    print(f"\nResults: {passed} passed, {failed} failed, {errors} errors (total: {len(results)})")

    return {
        "success": failed == 0 and errors == 0,
        "samples": results,
        "summary": summary,
    }


def generate_output_path():
    """Generate output path in format: evaluation/YYYY-MM-DD/HH-MM-SS/report.json"""
    now = datetime.now()
    date_str = now.strftime("%Y-%m-%d")
    time_str = now.strftime("%H-%M-%S")

    output_dir = PROJECT_ROOT / "evaluation" / date_str / time_str
    output_dir.mkdir(parents=True, exist_ok=True)

    return output_dir / "report.json"


def main(argv=None):
    """Main entry point for evaluation."""
    import argparse

    parser = argparse.ArgumentParser(description="Run the Huffman codec evaluation")
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output JSON file path (default: evaluation/YYYY-MM-DD/HH-MM-SS/report.json)"
    )
    parser.add_argument(
        "--input-file",
        type=str,
        default=None,
        help="Text file whose non-empty lines are added to the corpus"
    )

    args = parser.parse_args(argv)

    run_id = generate_run_id()
    started_at = datetime.now()

    print(f"Run ID: {run_id}")
    print(f"Started at: {started_at.isoformat()}")

    try:
        results = run_evaluation(load_samples(args.input_file))
        success = results["success"]
        error_message = None if success else "Some samples did not round-trip"
    except (OSError, UnicodeDecodeError) as e:
        print(f"\nERROR: {e}", file=sys.stderr)
        results = None
        success = False
        error_message = str(e)

    finished_at = datetime.now()
    duration = (finished_at - started_at).total_seconds()

    report = {
        "run_id": run_id,
        "started_at": started_at.isoformat(),
        "finished_at": finished_at.isoformat(),
        "duration_seconds": round(duration, 6),
        "success": success,
        "error": error_message,
        "environment": get_environment_info(),
        "results": results,
    }

    if args.output:
        output_path = Path(args.output)
    else:
        output_path = generate_output_path()

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(report, f, indent=2, ensure_ascii=False)
    print(f"\n✅ Report saved to: {output_path}")

    print(f"\n{'=' * 60}")
    print("EVALUATION COMPLETE")
    print(f"{'=' * 60}")
    print(f"Run ID: {run_id}")
    print(f"Duration: {duration:.2f}s")
    print(f"Success: {'✅ YES' if success else '❌ NO'}")

    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
