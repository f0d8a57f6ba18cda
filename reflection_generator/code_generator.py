"""
생성 코드 파일 출력 모듈
헤더 / 구현 / 등록 집계 텍스트를 만들어 출력 디렉토리에 기록합니다.
"""

from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from reflection_generator.config import GeneratorConfig
from reflection_generator.cpp_naming import stable_hash
from reflection_generator.diagnostics import Diagnostic, OutputError
from reflection_generator.header_generator import HeaderGenerator
from reflection_generator.implementation_generator import ImplementationGenerator
from reflection_generator.reflection_ast import ClassInfo, ReflectionData
from reflection_generator.registration_generator import RegistrationGenerator


GENERATED_HEADER_SUFFIX = '.generated.h'
GENERATED_SOURCE_SUFFIX = '.generated.cpp'


def plan_output_names(files: Sequence[Path]) -> Dict[str, str]:
    """
    입력 파일별 출력 파일 이름(stem) 결정

    같은 배치에서 stem이 겹치면 (예: Engine/Actor.h, Game/Actor.h)
    두 번째 이후 파일에 경로 해시를 붙여 덮어쓰기를 방지합니다.

    Returns:
        {str(입력 경로): 출력 stem}
    """
    names: Dict[str, str] = {}
    used = set()

    for path in files:
        key = str(path)
        if key in names:
            continue

        stem = Path(path).stem
        if stem in used:
            stem = f"{stem}_{stable_hash(Path(path).as_posix(), 6)}"
        used.add(stem)
        names[key] = stem

    return names


class CodeGenerator:
    """파일 단위 코드 생성 + 디스크 기록"""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()
        self.output_dir = Path(self.config.output_dir)
        self.header_generator = HeaderGenerator(self.config)
        self.implementation_generator = ImplementationGenerator(self.config)
        self.registration_generator = RegistrationGenerator()

    def header_path(self, stem: str) -> Path:
        return self.output_dir / f"{stem}{GENERATED_HEADER_SUFFIX}"

    def implementation_path(self, stem: str) -> Path:
        return self.output_dir / f"{stem}{GENERATED_SOURCE_SUFFIX}"

    def registration_path(self) -> Path:
        return self.output_dir / self.config.registration_file_name

    def render_file_outputs(self, data: ReflectionData, stem: str) -> List[Tuple[Path, str]]:
        """소스 파일 하나에 대한 (출력 경로, 내용) 목록 (클래스가 없으면 빈 목록)"""
        if not data.classes:
            return []

        header_path = self.header_path(stem)
        header = self.header_generator.generate_file(data.classes, data.file_name)
        implementation = self.implementation_generator.generate_file(
            data.classes, data.file_name, header_path.name)

        return [
            (header_path, header),
            (self.implementation_path(stem), implementation),
        ]

    def write_file_outputs(self, data: ReflectionData, stem: str) -> Tuple[List[Path], List[Diagnostic]]:
        """
        .generated.h / .generated.cpp 기록

        Returns:
            (기록된 파일 목록, 출력 에러 진단 목록)
        """
        written = []
        diagnostics = []

        for path, content in self.render_file_outputs(data, stem):
            try:
                self.write_output(path, content)
                written.append(path)
            except OutputError as e:
                diagnostics.append(e.to_diagnostic())

        return written, diagnostics

    def write_registration(self, classes: List[ClassInfo]) -> Tuple[Optional[Path], List[Diagnostic]]:
        """배치 전체의 등록 집계 파일 기록"""
        unique, duplicates = self.registration_generator.unique_classes(classes)
        first_declarations = {class_info.qualified_name: class_info for class_info in unique}

        # 각 파일의 .generated.cpp가 같은 심볼을 정의하므로 링크 에러가 됨
        diagnostics = []
        for class_info in duplicates:
            first = first_declarations[class_info.qualified_name]
            diagnostics.append(Diagnostic(
                "error", "input",
                f"Class '{class_info.qualified_name}' is already declared at "
                f"{first.file_name}:{first.line_number}; both generated files define its "
                f"reflection symbols and will fail to link (only the first is registered)",
                class_info.file_name, class_info.line_number))

        path = self.registration_path()
        try:
            self.write_output(path, self.registration_generator.generate(classes))
        except OutputError as e:
            diagnostics.append(e.to_diagnostic())
            return None, diagnostics

        return path, diagnostics

    @staticmethod
    def write_output(path: Path, content: str):
        """
        출력 파일 기록 (항상 덮어씀, 디렉토리는 필요하면 생성)

        Raises:
            OutputError: 디렉토리 생성 또는 쓰기 실패
        """
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            # newline='\n' -> 플랫폼과 관계없이 같은 바이트 출력
            with open(path, 'w', encoding='utf-8', newline='\n') as f:
                f.write(content)
        except OSError as e:
            raise OutputError(f"Cannot write generated file: {e}", file_name=str(path))
