"""
C++ 리플렉션 코드 생성기
GCLASS / GPROPERTY / GFUNCTION 주석이 달린 헤더에서 리플렉션 등록 / 직렬화 코드를 생성합니다.
"""

from reflection_generator.annotation_parser import (
    apply_annotations,
    parse_class_flags,
    parse_function_flags,
    parse_property_flags,
    tokenize,
)
from reflection_generator.code_generator import CodeGenerator
from reflection_generator.config import GeneratorConfig, ScanConfig
from reflection_generator.diagnostics import (
    AnnotationError,
    AnnotationSyntaxError,
    AnnotationValueError,
    Diagnostic,
    InputError,
    OutputError,
    ReflectionError,
)
from reflection_generator.file_scanner import FileScanner
from reflection_generator.header_analyzer import HeaderAnalyzer
from reflection_generator.parallel_processor import ParallelProcessor
from reflection_generator.reflection_ast import ClassInfo, FunctionInfo, PropertyInfo, ReflectionData

__version__ = '1.0.0'
