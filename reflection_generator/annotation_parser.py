"""
GCLASS / GPROPERTY / GFUNCTION 인자 파서
괄호 안의 원본 인자 텍스트를 플래그와 메타데이터로 변환합니다.

인자 목록은 단순 split(',')이 아니라 괄호 깊이와 문자열 리터럴을 추적하는
재귀 하강 방식으로 토큰화합니다. (예: Clamp(0,100) 은 토큰 하나)
"""

import re
from typing import Callable, List, Optional

from reflection_generator.diagnostics import (
    AnnotationError,
    AnnotationSyntaxError,
    AnnotationValueError,
    Diagnostic,
)
from reflection_generator.reflection_ast import (
    ClassInfo,
    FunctionInfo,
    PropertyInfo,
    ReflectionData,
)


_GROUP_PAIRS = {'(': ')', '[': ']', '{': '}'}
_GROUP_CLOSERS = set(_GROUP_PAIRS.values())
_QUOTES = ('"', "'")

# Name(...) 형태 / Name=Value 형태
_CALL_PATTERN = re.compile(r'^(\w+)\s*\((.*)\)$', re.DOTALL)
_ASSIGN_PATTERN = re.compile(r'^(\w+)\s*=\s*(.*)$', re.DOTALL)
_UNSIGNED_PATTERN = re.compile(r'^[0-9]+$')

_UINT32_MAX = 0xFFFFFFFF


class _ArgumentScanner:
    """최상위 콤마 기준으로 인자를 나누는 스캐너"""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.tokens: List[str] = []

    def scan(self) -> List[str]:
        start = 0
        while self.pos < len(self.text):
            ch = self.text[self.pos]
            if ch in _QUOTES:
                self.skip_quoted(ch)
            elif ch in _GROUP_PAIRS:
                self.skip_group(ch)
            elif ch in _GROUP_CLOSERS:
                raise self._error(f"unexpected '{ch}'", self.pos)
            elif ch == ',':
                self._emit(start, self.pos)
                self.pos += 1
                start = self.pos
            else:
                self.pos += 1

        self._emit(start, len(self.text))
        return self.tokens

    def skip_group(self, opener: str):
        """opener 위치에서 시작해 짝이 맞는 닫는 괄호 다음으로 이동 (중첩 지원)"""
        closer = _GROUP_PAIRS[opener]
        open_pos = self.pos
        self.pos += 1

        while self.pos < len(self.text):
            ch = self.text[self.pos]
            if ch in _QUOTES:
                self.skip_quoted(ch)
            elif ch in _GROUP_PAIRS:
                self.skip_group(ch)
            elif ch == closer:
                self.pos += 1
                return
            elif ch in _GROUP_CLOSERS:
                raise self._error(f"expected '{closer}' but found '{ch}'", self.pos)
            else:
                self.pos += 1

        raise self._error(f"unbalanced '{opener}'", open_pos)

    def skip_quoted(self, quote: str):
        open_pos = self.pos
        self.pos += 1

        while self.pos < len(self.text):
            ch = self.text[self.pos]
            if ch == '\\':
                self.pos += 2
                continue
            self.pos += 1
            if ch == quote:
                return

        raise self._error(f"unterminated string literal starting with {quote}", open_pos)

    def _emit(self, start: int, end: int):
        token = self.text[start:end].strip()
        if token:
            self.tokens.append(token)

    def _error(self, message: str, column: int) -> AnnotationSyntaxError:
        return AnnotationSyntaxError(
            f"{message} at column {column + 1}",
            tokens=self.tokens,
            column=column
        )


def tokenize(args_text: str) -> List[str]:
    """
    인자 텍스트를 최상위 콤마 기준으로 분리

    예: 'Save, Clamp(0,100), Category("A, B")'
        -> ['Save', 'Clamp(0,100)', 'Category("A, B")']

    Raises:
        AnnotationSyntaxError: 괄호/따옴표 짝이 맞지 않음 (e.tokens = 에러 이전 토큰)
    """
    return _ArgumentScanner(args_text).scan()


def extract_annotation_args(macro_text: str) -> str:
    """
    매크로 텍스트에서 가장 바깥 괄호 안의 내용 추출

    예: 'GPROPERTY(Save, Clamp(0,100)) int Health;' -> 'Save, Clamp(0,100)'
    """
    start = macro_text.find('(')
    if start == -1:
        return ""

    scanner = _ArgumentScanner(macro_text)
    scanner.pos = start
    scanner.skip_group('(')
    return macro_text[start + 1:scanner.pos - 1]


def _extract_quoted(text: str) -> Optional[str]:
    """첫 번째와 마지막 큰따옴표 사이의 텍스트"""
    start = text.find('"')
    end = text.rfind('"')
    if start == -1 or end <= start:
        return None
    return text[start + 1:end]


def _apply_tokens(args_text: str, apply_token: Callable[[str], None]):
    """토큰을 순서대로 적용. 문법 에러가 나도 에러 이전 토큰까지는 적용"""
    try:
        tokens = tokenize(args_text)
    except AnnotationSyntaxError as e:
        for token in e.tokens:
            apply_token(token)
        raise

    for token in tokens:
        apply_token(token)


def _apply_text_metadata(token: str, target) -> bool:
    """Category("...") / Tooltip("...") 및 Category="..." 형태 처리"""
    match = _CALL_PATTERN.match(token) or _ASSIGN_PATTERN.match(token)
    if not match:
        return False

    key = match.group(1)
    if key not in ('Category', 'Tooltip'):
        return False

    text = _extract_quoted(token)
    if text is not None:
        setattr(target, key.lower(), text)
    return True


def parse_class_flags(args_text: str, class_info: ClassInfo):
    """GCLASS 인자 파싱: Blueprintable, Serializable, Abstract, DefaultToInstanced, Version=N"""

    def apply_token(token: str):
        if class_info.set_flag(token):
            return

        assign = _ASSIGN_PATTERN.match(token)
        if assign and assign.group(1) == 'Version':
            value = assign.group(2).strip()
            if not _UNSIGNED_PATTERN.match(value) or int(value) > _UINT32_MAX:
                raise AnnotationValueError(
                    f"Version must be an unsigned integer, got '{value}'"
                )
            class_info.version = int(value)

    _apply_tokens(args_text, apply_token)


def parse_property_flags(args_text: str, prop: PropertyInfo):
    """GPROPERTY 인자 파싱: Save, Edit, Transient, EditorOnly, ReadOnly, Category, Tooltip, Clamp, Default"""

    def apply_token(token: str):
        if prop.set_flag(token):
            return

        if _apply_text_metadata(token, prop):
            return

        call = _CALL_PATTERN.match(token)
        if not call:
            return

        key, inner = call.group(1), call.group(2)
        if key == 'Clamp':
            # 안쪽 인자 목록도 콤마/괄호 인식 분리
            bounds = tokenize(inner)
            if len(bounds) >= 2:
                prop.clamp_min = bounds[0]
                prop.clamp_max = bounds[1]
        elif key == 'Default':
            # 리터럴 표현식 그대로 보관
            prop.default_value = inner

    _apply_tokens(args_text, apply_token)


def parse_function_flags(args_text: str, func: FunctionInfo):
    """GFUNCTION 인자 파싱: Callable, BlueprintEvent, BlueprintCallable, Category, Tooltip"""

    def apply_token(token: str):
        if func.set_flag(token):
            return
        _apply_text_metadata(token, func)

    _apply_tokens(args_text, apply_token)


def _parse_entity(parse: Callable, entity, macro: str, default_file: str, diagnostics: List[Diagnostic]):
    try:
        parse(entity.annotation, entity)
    except AnnotationError as e:
        e.file_name = entity.file_name or default_file
        e.line_number = entity.line_number
        e.message = f"{macro} on '{entity.name}': {e.message}"
        diagnostics.append(e.to_diagnostic())


def apply_annotations(data: ReflectionData) -> List[Diagnostic]:
    """
    ReflectionData 안의 모든 원본 인자 텍스트를 파싱하여 플래그/메타데이터 채우기

    한 선언에서 에러가 나도 나머지 선언은 계속 처리합니다.

    Returns:
        에러 진단 목록 (선언 순서)
    """
    diagnostics: List[Diagnostic] = []

    for class_info in data.classes:
        _parse_entity(parse_class_flags, class_info, 'GCLASS', data.file_name, diagnostics)

        for prop in class_info.properties:
            _parse_entity(parse_property_flags, prop, 'GPROPERTY', data.file_name, diagnostics)

        for func in class_info.functions:
            _parse_entity(parse_function_flags, func, 'GFUNCTION', data.file_name, diagnostics)

    return diagnostics
