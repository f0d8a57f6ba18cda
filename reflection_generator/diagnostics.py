"""
에러 분류 및 진단 메시지 출력 모듈
파일 단위로 에러를 수집하고, 배치 전체를 중단하지 않고 계속 진행합니다.
"""

import sys
from dataclasses import dataclass
from typing import List, Optional


class ReflectionError(Exception):
    """리플렉션 생성기 에러의 베이스 클래스"""

    category = "error"

    def __init__(self, message: str, file_name: str = "", line_number: int = 0):
        super().__init__(message)
        self.message = message
        self.file_name = file_name
        self.line_number = line_number

    def to_diagnostic(self) -> 'Diagnostic':
        return Diagnostic(
            severity="error",
            category=self.category,
            message=self.message,
            file_name=self.file_name,
            line_number=self.line_number
        )


class InputError(ReflectionError):
    """존재하지 않는 디렉토리, 읽을 수 없는 파일"""
    category = "input"


class AnnotationError(ReflectionError):
    """GCLASS/GPROPERTY/GFUNCTION 인자 문법 에러"""
    category = "annotation"


class AnnotationSyntaxError(AnnotationError):
    """괄호/따옴표 짝이 맞지 않는 경우"""

    def __init__(self, message: str, tokens: Optional[List[str]] = None, column: int = 0):
        super().__init__(message)
        # 에러 이전까지 완성된 토큰들 (부분 적용용)
        self.tokens = list(tokens or [])
        self.column = column


class AnnotationValueError(AnnotationError):
    """Version= 값처럼 토큰 값 자체가 잘못된 경우"""


class OutputError(ReflectionError):
    """출력 디렉토리 생성 또는 파일 쓰기 실패"""
    category = "output"


@dataclass(frozen=True)
class Diagnostic:
    """보고용 진단 메시지 (프로세스 간 전달 가능)"""
    severity: str           # "error" 또는 "warning"
    category: str           # "input", "annotation", "output"
    message: str
    file_name: str = ""
    line_number: int = 0

    @property
    def is_error(self) -> bool:
        return self.severity == "error"

    def format(self) -> str:
        """path:line: severity: message 형식"""
        location = self.file_name or "<unknown>"
        if self.line_number:
            location = f"{location}:{self.line_number}"
        return f"{location}: {self.severity}: {self.message}"


class Reporter:
    """콘솔 출력 담당 (verbose 모드일 때만 정보성 로그 출력)"""

    def __init__(self, verbose: bool = False, stream=None, error_stream=None):
        self.verbose = verbose
        self.stream = stream if stream is not None else sys.stdout
        self.error_stream = error_stream if error_stream is not None else sys.stderr
        self.error_count = 0
        self.warning_count = 0

    def info(self, tag: str, message: str):
        if self.verbose:
            print(f"[{tag}] {message}", file=self.stream)

    def report(self, diagnostic: Diagnostic):
        if diagnostic.is_error:
            self.error_count += 1
        else:
            self.warning_count += 1
        print(diagnostic.format(), file=self.error_stream)

    def report_all(self, diagnostics: List[Diagnostic]):
        for diagnostic in diagnostics:
            self.report(diagnostic)

    def summary(self, files_processed: int, classes_generated: int, output_dir: str):
        print("Reflection generation completed:", file=self.stream)
        print(f"  Files processed: {files_processed}", file=self.stream)
        print(f"  Classes generated: {classes_generated}", file=self.stream)
        print(f"  Output directory: {output_dir}", file=self.stream)
        if self.error_count or self.warning_count:
            print(f"  Errors: {self.error_count}, Warnings: {self.warning_count}", file=self.stream)
