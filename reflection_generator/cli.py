"""
리플렉션 코드 생성기 CLI

사용 예:
    reflection-generator --scan-dirs Engine,Game --output-dir Build/Generated
    reflection-generator --input-files Engine/Public/Core/Player.h -v
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from reflection_generator.config import DEFAULT_OUTPUT_DIR, GeneratorConfig
from reflection_generator.diagnostics import InputError, Reporter
from reflection_generator.file_scanner import FileScanner
from reflection_generator.parallel_processor import ParallelProcessor


class _ArgumentParser(argparse.ArgumentParser):
    """인자 에러 시 종료 코드 1 (argparse 기본값은 2)"""

    def error(self, message):
        self.print_usage(sys.stderr)
        print(f"{self.prog}: error: {message}", file=sys.stderr)
        sys.exit(1)


def split_list(value: Optional[str]) -> List[str]:
    """콤마 구분 목록 -> 리스트 (앞뒤 공백 제거, 빈 항목 제외)"""
    if not value:
        return []
    return [item.strip() for item in value.split(',') if item.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog='reflection-generator',
        description='Generate C++ reflection and serialization code from GCLASS/GPROPERTY/GFUNCTION annotations',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Example:
  reflection-generator --scan-dirs Engine,Game --output-dir Build/Generated
  reflection-generator --input-files Engine/Public/Core/Player.h --output-dir Build/Generated
        """
    )

    parser.add_argument(
        '--scan-dirs',
        help='Comma-separated directories to scan for reflection-enabled classes'
    )
    parser.add_argument(
        '--input-files',
        help='Comma-separated header files to process (takes precedence over --scan-dirs)'
    )
    parser.add_argument(
        '--output-dir',
        default=DEFAULT_OUTPUT_DIR,
        help=f'Output directory for generated files (default: {DEFAULT_OUTPUT_DIR})'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '-j', '--jobs',
        type=int,
        default=None,
        help='Number of worker processes (default: CPU count)'
    )
    parser.add_argument(
        '--strict',
        action='store_true',
        help='Exit with code 1 if any error was reported'
    )

    return parser


def collect_files(scan_dirs: List[str], input_files: List[str], reporter: Reporter) -> List[Path]:
    """처리할 파일 목록 (입력 파일이 있으면 스캔 디렉토리는 무시)"""
    if input_files:
        return [Path(path) for path in input_files]

    scanner = FileScanner()
    files = []
    for directory in scan_dirs:
        reporter.info("FileScanner", f"Scanning directory: {directory}")
        diagnostics = []
        try:
            found = scanner.scan_directory(Path(directory), diagnostics)
        except InputError as e:
            reporter.report(e.to_diagnostic())
            continue
        reporter.report_all(diagnostics)
        reporter.info("FileScanner", f"Found {len(found)} files in {directory}")
        files.extend(found)

    return files


def main(argv: Optional[List[str]] = None) -> int:
    """메인 엔트리포인트 (종료 코드 반환)"""
    parser = build_parser()
    args = parser.parse_args(argv)

    scan_dirs = split_list(args.scan_dirs)
    input_files = split_list(args.input_files)

    if not scan_dirs and not input_files:
        print("Error: No input directories or files specified", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1

    if args.jobs is not None and args.jobs < 1:
        print("Error: --jobs must be at least 1", file=sys.stderr)
        return 1

    reporter = Reporter(verbose=args.verbose)
    config = GeneratorConfig(output_dir=Path(args.output_dir), num_processes=args.jobs)

    files = collect_files(scan_dirs, input_files, reporter)
    reporter.info("Generator", f"Found {len(files)} files to process")

    batch = ParallelProcessor(config, reporter).process(files)
    reporter.report_all(batch.diagnostics)

    for result in batch.files:
        if result.classes:
            reporter.info("Generator",
                          f"Generated reflection for {len(result.classes)} classes from {result.file_name}")

    reporter.summary(batch.files_processed, len(batch.classes), args.output_dir)

    if args.strict and reporter.error_count:
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
