"""
리플렉션 대상 헤더 파일 탐색 모듈
확장자 / 제외 디렉토리 / 매크로 키워드로 후보 파일을 거릅니다.
"""

from pathlib import Path
from typing import List, Optional

from reflection_generator.config import ScanConfig
from reflection_generator.diagnostics import Diagnostic, InputError


class FileScanner:
    """헤더 파일 스캐너"""

    def __init__(self, config: Optional[ScanConfig] = None):
        self.config = config or ScanConfig()

    def scan_directory(self, directory: Path, diagnostics: Optional[List[Diagnostic]] = None) -> List[Path]:
        """
        디렉토리에서 리플렉션 매크로가 있는 헤더 파일 찾기

        Args:
            directory: 스캔할 루트 디렉토리
            diagnostics: 읽을 수 없는 파일 에러를 추가할 리스트

        Returns:
            후보 헤더 파일 목록 (경로 순으로 정렬 - 실행마다 같은 순서)

        Raises:
            InputError: 디렉토리가 없거나 디렉토리가 아님
        """
        directory = Path(directory)
        if not directory.is_dir():
            raise InputError(
                "Directory does not exist or is not a directory",
                file_name=str(directory)
            )

        result = []
        for path in self.get_header_files(directory):
            try:
                if self.contains_reflection_macros(path):
                    result.append(path)
            except InputError as e:
                # 파일 하나 실패해도 나머지는 계속 스캔
                if diagnostics is None:
                    raise
                diagnostics.append(e.to_diagnostic())

        return result

    def get_header_files(self, directory: Path) -> List[Path]:
        """제외 디렉토리를 건너뛰고 헤더 확장자 파일만 재귀 수집"""
        directory = Path(directory)
        result = []

        for path in sorted(directory.rglob('*')):
            if not path.is_file() or path.suffix not in self.config.header_extensions:
                continue

            relative_parts = path.relative_to(directory).parts[:-1]
            if self.should_exclude_directory(relative_parts):
                continue

            result.append(path)

        return result

    def should_exclude_directory(self, dir_parts) -> bool:
        """경로 구성요소 중 하나라도 제외 목록에 있으면 True"""
        return any(part in self.config.excluded_directories for part in dir_parts)

    def should_process_file(self, path: Path) -> bool:
        """명시적으로 지정된 파일용 검사: 헤더 확장자 + 매크로 포함"""
        path = Path(path)
        return path.suffix in self.config.header_extensions and self.contains_reflection_macros(path)

    def contains_reflection_macros(self, path: Path) -> bool:
        """
        GCLASS / GPROPERTY / GFUNCTION 문자열이 있는 줄이 하나라도 있는지 (대소문자 구분)
        문법 검사가 아닌 빠른 사전 필터입니다.
        """
        try:
            with open(path, encoding='utf-8', errors='replace') as f:
                for line in f:
                    if any(keyword in line for keyword in self.config.keywords):
                        return True
        except OSError as e:
            raise InputError(f"Cannot read file: {e}", file_name=str(path))

        return False
