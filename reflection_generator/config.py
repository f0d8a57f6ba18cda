"""
스캐너 / 코드 생성기 설정
전역 상태 대신 불변 설정 객체로 전달합니다.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple


DEFAULT_HEADER_EXTENSIONS = ('.h', '.hpp', '.hxx', '.hh')

# 벤더/빌드/VCS 디렉토리 (깊이와 상관없이 제외)
DEFAULT_EXCLUDED_DIRECTORIES = (
    'External',
    'Build',
    'bin',
    'lib',
    'obj',
    'Debug',
    'Release',
    'x64',
    'x86',
    '.git',
    '.vs',
    'CMakeFiles',
    'node_modules',
)

REFLECTION_KEYWORDS = ('GCLASS', 'GPROPERTY', 'GFUNCTION')

DEFAULT_OUTPUT_DIR = 'Build/Generated'
DEFAULT_RUNTIME_NAMESPACE = 'Engine::Core'
DEFAULT_RUNTIME_INCLUDES = (
    'Engine/Public/Core/TypeRegistry.h',
    'Engine/Public/Core/BinarySerializer.h',
)
DEFAULT_REGISTRATION_FILE = 'ReflectionRegistration.generated.cpp'


@dataclass(frozen=True)
class ScanConfig:
    """FileScanner 설정"""
    header_extensions: Tuple[str, ...] = DEFAULT_HEADER_EXTENSIONS
    excluded_directories: Tuple[str, ...] = DEFAULT_EXCLUDED_DIRECTORIES
    keywords: Tuple[str, ...] = REFLECTION_KEYWORDS


@dataclass(frozen=True)
class GeneratorConfig:
    """코드 생성 및 병렬 처리 설정"""
    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)
    runtime_namespace: str = DEFAULT_RUNTIME_NAMESPACE
    runtime_includes: Tuple[str, ...] = DEFAULT_RUNTIME_INCLUDES
    registration_file_name: str = DEFAULT_REGISTRATION_FILE
    num_processes: Optional[int] = None  # None이면 CPU 코어 수만큼

    @property
    def runtime_prefix(self) -> str:
        """생성 코드에서 사용하는 런타임 네임스페이스 접두사 (예: ::Engine::Core)"""
        namespace = self.runtime_namespace.strip(':')
        return f"::{namespace}" if namespace else ""
