"""
C++ 헤더 파일 분석 모듈
GCLASS / GPROPERTY / GFUNCTION 매크로를 찾아서 파싱 전 원본 인자 텍스트가 붙은
ClassInfo / PropertyInfo / FunctionInfo 골격을 만듭니다.

완전한 C++ 파서가 아니라 정규식 + 괄호 매칭 기반의 경량 분석기입니다.
(타입 해석, 오프셋 계산은 하지 않음)
"""

import re
from pathlib import Path
from typing import List, Optional, Tuple

from reflection_generator.annotation_parser import extract_annotation_args, tokenize
from reflection_generator.diagnostics import AnnotationSyntaxError, Diagnostic, InputError
from reflection_generator.reflection_ast import (
    ClassInfo,
    FunctionInfo,
    PropertyInfo,
    ReflectionData,
)


# 주석 / 문자열 리터럴 (문자열 안의 // 는 주석이 아님)
_COMMENT_OR_STRING = re.compile(
    r'//[^\n]*'
    r'|/\*.*?\*/'
    r'|"(?:\\.|[^"\\\n])*"'
    r"|'(?:\\.|[^'\\\n])*'",
    re.DOTALL
)

# 전처리 지시문 (백슬래시 줄 연속 포함)
_PREPROCESSOR_LINE = re.compile(r'^[ \t]*#(?:[^\n]*\\\n)*[^\n]*', re.MULTILINE)

# 네임스페이스 / GCLASS / 중괄호 스캔
_SCOPE_PATTERN = re.compile(
    r'"(?:\\.|[^"\\\n])*"'
    r"|'(?:\\.|[^'\\\n])*'"
    r'|\bnamespace\s+(?P<ns>[A-Za-z_][\w:]*)\s*(?P<ns_open>\{)'
    r'|\bnamespace\s*(?P<anon_open>\{)'
    r'|(?P<gclass>\bGCLASS\s*\()'
    r'|(?P<open>\{)'
    r'|(?P<close>\})'
)

# 클래스 본문 안의 멤버 매크로 스캔
_MEMBER_PATTERN = re.compile(
    r'"(?:\\.|[^"\\\n])*"'
    r"|'(?:\\.|[^'\\\n])*'"
    r'|(?P<macro>\b(?:GPROPERTY|GFUNCTION)\s*\()'
    r'|(?P<open>\{)'
    r'|(?P<close>\})'
)

CLASS_DECL_PATTERN = re.compile(
    r'\s*(?P<kind>class|struct)\s+'
    r'(?:[A-Z][A-Z0-9_]*_API\s+)?'             # export 매크로 (ENGINE_API 등)
    r'(?P<name>[A-Za-z_]\w*)\s*'
    r'(?:final\s*)?'
    r'(?::(?P<bases>[^{;]*))?\{'
)

PROPERTY_DECL_PATTERN = re.compile(
    r'\s*(?P<type>[\w:<>,*&\s]+?[\s*&>])(?P<name>[A-Za-z_]\w*)\s*(?:[;=]|\{)'
)

FUNCTION_DECL_PATTERN = re.compile(
    r'\s*(?P<ret>[\w:<>,*&\s]*?[\s*&>])(?P<name>[A-Za-z_]\w*)\s*\('
)

_PARAMETER_PATTERN = re.compile(r'^(?P<type>.*?[\s*&>])(?P<name>[A-Za-z_]\w*)$', re.DOTALL)

_ACCESS_KEYWORDS = ('public', 'protected', 'private', 'virtual')
_FUNCTION_SPECIFIERS = ('virtual', 'static', 'inline', 'explicit', 'constexpr', 'FORCEINLINE')


def _blank(match: re.Match) -> str:
    """매치된 텍스트를 같은 줄 수의 빈 줄로 치환 (줄 번호 유지)"""
    return '\n' * match.group(0).count('\n')


def _strip_comments(content: str) -> str:
    """C++ 주석 제거 (문자열 리터럴은 유지)"""

    def replace(match: re.Match) -> str:
        text = match.group(0)
        if text.startswith('/'):
            return '\n' * text.count('\n')
        return text

    return _COMMENT_OR_STRING.sub(replace, content)


def preprocess_source(content: str) -> str:
    """주석과 전처리 지시문을 지운 분석용 텍스트 (줄 번호는 원본과 동일)"""
    content = _strip_comments(content)
    return _PREPROCESSOR_LINE.sub(_blank, content)


def split_top_level(text: str, separator: str = ',') -> List[str]:
    """
    템플릿 / 괄호 중첩을 고려한 분리
    예: "std::map<int, float> a, int b" -> ["std::map<int, float> a", "int b"]
    """
    parts = []
    depth = 0
    current = []
    for ch in text:
        if ch in '<([{':
            depth += 1
        elif ch in '>)]}' and depth > 0:
            depth -= 1
        elif ch == separator and depth == 0:
            parts.append(''.join(current).strip())
            current = []
            continue
        current.append(ch)

    tail = ''.join(current).strip()
    if tail or parts:
        parts.append(tail)
    return parts


def _strip_leading_words(text: str, words: Tuple[str, ...]) -> str:
    parts = text.split()
    while parts and parts[0] in words:
        parts.pop(0)
    return ' '.join(parts)


def _line_number(content: str, pos: int) -> int:
    return content.count('\n', 0, pos) + 1


def _recover_annotation(source: str, paren_pos: int, limit: int) -> Tuple[str, int]:
    """
    괄호 / 따옴표 짝이 맞지 않는 매크로 인자 복구
    매크로가 있는 줄 끝까지를 인자로 보고, 에러 이전까지 완성된 토큰만 남김

    Returns:
        (복구된 인자 텍스트, 선언 탐색 시작 위치)
    """
    line_end = source.find('\n', paren_pos, limit)
    if line_end == -1:
        line_end = limit

    try:
        tokens = tokenize(source[paren_pos + 1:line_end])
    except AnnotationSyntaxError as e:
        tokens = e.tokens

    return ', '.join(tokens), line_end


def _find_matching_brace(content: str, open_pos: int) -> int:
    """open_pos의 '{'와 짝이 맞는 '}' 위치 (없으면 문자열 끝)"""
    depth = 0
    for match in _MEMBER_PATTERN.finditer(content, open_pos):
        if match.group('open'):
            depth += 1
        elif match.group('close'):
            depth -= 1
            if depth == 0:
                return match.start()
    return len(content)


class HeaderAnalyzer:
    """C++ 헤더 분석기 (파일당 ReflectionData 하나 생성)"""

    def analyze(self, header_path: Path, diagnostics: Optional[List[Diagnostic]] = None) -> ReflectionData:
        """
        헤더 파일 분석

        Args:
            header_path: 분석할 헤더 파일
            diagnostics: 경고/에러를 추가할 리스트 (None이면 버림)

        Returns:
            ReflectionData (클래스가 없거나 해석 불가능하면 빈 classes)

        Raises:
            InputError: 파일을 읽을 수 없음
        """
        try:
            content = Path(header_path).read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise InputError(f"Cannot read file: {e}", file_name=str(header_path))

        return self.analyze_source(content, str(header_path), diagnostics)

    def analyze_source(self, content: str, file_name: str,
                       diagnostics: Optional[List[Diagnostic]] = None) -> ReflectionData:
        """소스 텍스트 분석 (파일 I/O 없음)"""
        if diagnostics is None:
            diagnostics = []

        data = ReflectionData(file_name=file_name)
        source = preprocess_source(content)

        # 스코프 스택: 네임스페이스면 이름 리스트, 일반 블록이면 None
        scope_stack: List[Optional[List[str]]] = []

        for match in _SCOPE_PATTERN.finditer(source):
            if match.group('ns_open'):
                scope_stack.append([part for part in match.group('ns').split('::') if part])
            elif match.group('anon_open'):
                scope_stack.append([])
            elif match.group('open'):
                scope_stack.append(None)
            elif match.group('close'):
                if scope_stack:
                    scope_stack.pop()
            elif match.group('gclass'):
                if None in scope_stack:
                    # 클래스 / 함수 본문 안의 GCLASS (중첩 타입) 는 미지원
                    diagnostics.append(Diagnostic(
                        "warning", "input", "GCLASS on a nested type is not supported",
                        file_name, _line_number(source, match.start())))
                    continue
                namespaces = [name for scope in scope_stack if scope for name in scope]
                class_info = self._parse_class(source, match.start(), match.end() - 1,
                                               namespaces, file_name, diagnostics)
                if class_info:
                    data.classes.append(class_info)

        return data

    def _parse_class(self, source: str, macro_pos: int, paren_pos: int, namespaces: List[str],
                     file_name: str, diagnostics: List[Diagnostic]) -> Optional[ClassInfo]:
        line = _line_number(source, macro_pos)

        try:
            annotation = extract_annotation_args(source[paren_pos:])
            args_end = paren_pos + len(annotation) + 2
        except AnnotationSyntaxError as e:
            # 에러 이전까지 완성된 인자만으로 클래스는 계속 생성
            diagnostics.append(Diagnostic("error", "annotation", f"GCLASS: {e.message}", file_name, line))
            annotation, args_end = _recover_annotation(source, paren_pos, len(source))

        decl = CLASS_DECL_PATTERN.match(source, args_end)
        if not decl:
            diagnostics.append(Diagnostic(
                "warning", "input", "GCLASS is not followed by a class declaration", file_name, line))
            return None

        class_info = ClassInfo(
            name=decl.group('name'),
            namespaces=list(namespaces),
            base_class=self._first_base(decl.group('bases') or ""),
            kind=decl.group('kind'),
            file_name=file_name,
            line_number=line,
            annotation=annotation
        )

        body_start = decl.end() - 1
        body_end = _find_matching_brace(source, body_start)
        self._parse_members(source, body_start + 1, body_end, class_info, diagnostics)

        return class_info

    @staticmethod
    def _first_base(bases: str) -> str:
        """첫 번째 베이스 클래스만 사용 (다중 상속 미지원)"""
        if not bases.strip():
            return ""
        first = split_top_level(bases)[0]
        base = _strip_leading_words(first, _ACCESS_KEYWORDS)
        return base[2:] if base.startswith('::') else base

    def _parse_members(self, source: str, start: int, end: int, class_info: ClassInfo,
                       diagnostics: List[Diagnostic]):
        """클래스 본문(깊이 0)의 GPROPERTY / GFUNCTION 파싱 (선언 순서 유지)"""
        depth = 0
        pos = start

        while True:
            match = _MEMBER_PATTERN.search(source, pos, end)
            if not match:
                break
            pos = match.end()

            if match.group('open'):
                depth += 1
                continue
            if match.group('close'):
                depth -= 1
                continue
            if not match.group('macro') or depth != 0:
                continue

            macro = match.group('macro').split('(')[0].strip()
            line = _line_number(source, match.start())
            paren_pos = match.end() - 1

            try:
                annotation = extract_annotation_args(source[paren_pos:end])
                args_end = paren_pos + len(annotation) + 2
            except AnnotationSyntaxError as e:
                # 에러 이전까지 완성된 인자만으로 멤버는 계속 생성
                diagnostics.append(Diagnostic(
                    "error", "annotation", f"{macro}: {e.message}", class_info.file_name, line))
                annotation, args_end = _recover_annotation(source, paren_pos, end)

            pos = args_end

            if macro == 'GPROPERTY':
                prop = self._parse_property(source, args_end, annotation, class_info.file_name, line)
                if prop:
                    class_info.properties.append(prop)
                    continue
            else:
                func = self._parse_function(source, args_end, annotation, class_info.file_name, line)
                if func:
                    class_info.functions.append(func)
                    continue

            diagnostics.append(Diagnostic(
                "warning", "input",
                f"{macro} in '{class_info.name}' is not followed by a supported declaration",
                class_info.file_name, line))

    @staticmethod
    def _parse_property(source: str, pos: int, annotation: str, file_name: str,
                        line: int) -> Optional[PropertyInfo]:
        decl = PROPERTY_DECL_PATTERN.match(source, pos)
        if not decl:
            return None

        type_str = _strip_leading_words(decl.group('type'), ('mutable',)).strip()
        if not type_str or type_str.split()[0] == 'static':
            return None

        return PropertyInfo(
            name=decl.group('name'),
            type=type_str,
            file_name=file_name,
            line_number=line,
            annotation=annotation
        )

    @staticmethod
    def _parse_function(source: str, pos: int, annotation: str, file_name: str,
                        line: int) -> Optional[FunctionInfo]:
        decl = FUNCTION_DECL_PATTERN.match(source, pos)
        if not decl:
            return None

        return_type = _strip_leading_words(decl.group('ret'), _FUNCTION_SPECIFIERS).strip()
        if not return_type:
            return None

        paren_pos = decl.end() - 1
        try:
            params_str = extract_annotation_args(source[paren_pos:])
        except AnnotationSyntaxError:
            return None

        func = FunctionInfo(
            name=decl.group('name'),
            return_type=return_type,
            file_name=file_name,
            line_number=line,
            annotation=annotation
        )

        params_str = params_str.strip()
        if params_str and params_str != 'void':
            for index, param in enumerate(split_top_level(params_str)):
                # 기본값 제거: "int Count = 5" -> "int Count"
                param = split_top_level(param, '=')[0].strip()
                param_match = _PARAMETER_PATTERN.match(param)
                if param_match and param_match.group('type').strip():
                    func.add_parameter(param_match.group('name'), param_match.group('type').strip())
                else:
                    # 이름 없는 파라미터
                    func.add_parameter(f"param{index}", param)

        return func
