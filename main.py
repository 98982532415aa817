import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from cases import CaseError, SearchCase, discover_cases, load_case
from config import logger, INPUT_DIR, OUTPUT_DIR, LOG_PATH
from kmp import build_lps, search, search_all
from logging_config import setup_logging
from report import SearchReport, build_report, format_lps, output_path_for, write_report


USAGE = (
    "Usage:\n"
    "  python main.py [input_dir [output_dir]]   run every *.json case in input_dir\n"
    "  python main.py search TEXT PATTERN        search PATTERN in TEXT once"
)

class Colors:
    GREEN = '\033[92m'
    RED = '\033[91m'
    YELLOW = '\033[93m'
    BLUE = '\033[94m'
    RESET = '\033[0m'


@dataclass
class RunSummary:
    total: int = 0
    passed: int = 0
    failed: int = 0
    failures: List[str] = field(default_factory=list)


def run_case(case: SearchCase) -> SearchReport:
    """Search one case, timing the first-match search only."""
    start = time.perf_counter_ns()
    index = search(case.text, case.pattern)
    elapsed_ns = time.perf_counter_ns() - start

    matches = search_all(case.text, case.pattern)
    lps = build_lps(case.pattern)
    return build_report(case, index, matches, lps, elapsed_ns)


def print_report(report: SearchReport) -> None:
    print(f"Text: \"{report.text}\"")
    print(f"Pattern: \"{report.pattern}\"")
    if report.found:
        print(f"Result: {Colors.GREEN}Found at index {report.index}{Colors.RESET}")
    else:
        print(f"Result: {Colors.YELLOW}Not found{Colors.RESET}")
    print(f"All matches: {report.matches}")
    print(f"LPS Array: {format_lps(report.lps_array)}")
    print(f"Execution Time: {report.execution_time_ns} ns ({report.execution_time_ns / 1000:.3f} μs)")


class KMPTestRunner:
    """
    Runs every test case found in an input directory through the KMP matcher
    and writes one JSON report per case to the output directory.
    """
    def __init__(self, input_dir: str = INPUT_DIR, output_dir: str = OUTPUT_DIR):
        self.input_dir = Path(input_dir)
        self.output_dir = Path(output_dir)

    def process_test_case(self, input_file: Path) -> SearchReport:
        """Load, search and report a single input file."""
        case = load_case(input_file)

        print("\n" + "=" * 80)
        print(f"Processing: {input_file.name}")
        print(f"Test ID: {case.test_id}")
        print(f"Description: {case.description}")
        print("-" * 80)

        report = run_case(case)
        print_report(report)

        output_file = write_report(report, output_path_for(input_file, self.output_dir))
        print(f"Output written to: {output_file}")
        logger.info(
            f"Case '{case.test_id}' ({input_file.name}): index={report.index}, "
            f"matches={len(report.matches)}, time={report.execution_time_ns}ns"
        )
        return report

    def run(self) -> Optional[RunSummary]:
        """Process all input files. Returns None if the input directory is missing."""
        print("KMP Algorithm Test Runner")
        print("=" * 80)

        if not self.input_dir.is_dir():
            logger.error(f"Input directory not found: {self.input_dir}")
            print(f"{Colors.RED}Error: Input directory not found: {self.input_dir}{Colors.RESET}")
            return None

        input_files = discover_cases(self.input_dir)
        summary = RunSummary(total=len(input_files))
        if not input_files:
            logger.warning(f"No test files found in {self.input_dir}")
            print(f"{Colors.YELLOW}No test files found in {self.input_dir}{Colors.RESET}")
            return summary

        print(f"Found {len(input_files)} test case(s)")

        for input_file in input_files:
            try:
                self.process_test_case(input_file)
                summary.passed += 1
            except (CaseError, OSError) as e:
                logger.error(f"Failed to process {input_file.name}: {e}")
                print(f"{Colors.RED}Failed to process: {input_file.name}: {e}{Colors.RESET}")
                summary.failed += 1
                summary.failures.append(input_file.name)

        self._print_summary(summary)
        return summary

    def _print_summary(self, summary: RunSummary) -> None:
        print("\n" + "=" * 80)
        print(f"{Colors.BLUE}TEST SUMMARY{Colors.RESET}")
        print("=" * 80)
        print(f"Total tests: {summary.total}")
        print(f"{Colors.GREEN}Passed: {summary.passed}{Colors.RESET}")
        if summary.failed:
            print(f"{Colors.RED}Failed: {summary.failed}{Colors.RESET}")
            print(f"  Failed files: {', '.join(summary.failures)}")
        else:
            print(f"Failed: {summary.failed}")
        print(f"\nAll output files written to: {self.output_dir}")
        print("=" * 80)


def search_once(text: str, pattern: str) -> int:
    """Ad-hoc search from the command line."""
    case = SearchCase(test_id="cli", text=text, pattern=pattern)
    print_report(run_case(case))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    if argv and argv[0] in ("-h", "--help"):
        print(USAGE)
        return 0

    if argv and argv[0] == "search":
        if len(argv) != 3:
            print(USAGE)
            return 2
        return search_once(argv[1], argv[2])

    if len(argv) > 2:
        print(USAGE)
        return 2

    setup_logging(LOG_PATH)
    logger.info("Runner starting...")

    input_dir = argv[0] if len(argv) > 0 else INPUT_DIR
    output_dir = argv[1] if len(argv) > 1 else OUTPUT_DIR
    summary = KMPTestRunner(input_dir, output_dir).run()

    if summary is None or summary.failed:
        return 1
    logger.info(f"Runner finished: {summary.passed}/{summary.total} case(s) processed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
