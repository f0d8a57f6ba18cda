"""
리플렉션 메타데이터 모델
GCLASS / GPROPERTY / GFUNCTION 으로 표시된 선언의 구조화된 정보를 보관합니다.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Set, Tuple


SCOPE_SEPARATOR = '::'

# 플래그 테이블 (생성 코드의 플래그 순서도 이 순서를 따름)
CLASS_FLAGS = ('Blueprintable', 'Serializable', 'Abstract', 'DefaultToInstanced')
PROPERTY_FLAGS = ('Save', 'Edit', 'Transient', 'EditorOnly', 'ReadOnly')
FUNCTION_FLAGS = ('Callable', 'BlueprintEvent', 'BlueprintCallable')

ELABORATED_KEYWORDS = ('class', 'struct', 'enum', 'union', 'typename')


def _is_identifier_char(ch: str) -> bool:
    return bool(ch) and (ch.isalnum() or ch == '_')


def canonicalize_type(type_str: str) -> str:
    """
    타입 문자열 정규화
    - 템플릿 인자 목록(<...>) 밖의 공백 제거 (단, 식별자 사이 공백은 하나로 유지)
    - 템플릿 인자 목록 안의 공백은 유지
    - 앞쪽의 class/struct/enum 키워드와 전역 '::' 제거

    예: "class UTexture *"                  -> "UTexture*"
    예: "std::map<std::string, int> &"      -> "std::map<std::string, int>&"
    예: "unsigned   int"                    -> "unsigned int"
    """
    text = ' '.join(type_str.split())

    words = text.split(' ', 1)
    while len(words) == 2 and words[0] in ELABORATED_KEYWORDS:
        text = words[1]
        words = text.split(' ', 1)

    if text.startswith(SCOPE_SEPARATOR):
        text = text[len(SCOPE_SEPARATOR):]

    result = []
    depth = 0
    for i, ch in enumerate(text):
        if ch == '<':
            depth += 1
        elif ch == '>' and depth > 0:
            depth -= 1
        elif ch == ' ' and depth == 0:
            prev_ch = result[-1] if result else ''
            next_ch = text[i + 1] if i + 1 < len(text) else ''
            if not (_is_identifier_char(prev_ch) and _is_identifier_char(next_ch)):
                continue
        result.append(ch)

    return ''.join(result)


def make_qualified_name(namespaces: List[str], name: str) -> str:
    """네임스페이스 스택(바깥쪽부터) + 이름 -> A::B::Name"""
    return SCOPE_SEPARATOR.join([ns for ns in namespaces if ns] + [name])


class _FlagSetMixin:
    """문자열 집합 기반 플래그 (알 수 없는 플래그는 무시)"""

    KNOWN_FLAGS: Tuple[str, ...] = ()
    flags: Set[str]

    def set_flag(self, flag_name: str) -> bool:
        """인식 가능한 플래그면 설정하고 True 반환"""
        if flag_name in self.KNOWN_FLAGS:
            self.flags.add(flag_name)
            return True
        return False

    def has_flag(self, flag_name: str) -> bool:
        return flag_name in self.flags

    def ordered_flags(self) -> List[str]:
        """플래그 테이블 순서대로 정렬된 플래그 목록 (결정적 출력용)"""
        return [flag for flag in self.KNOWN_FLAGS if flag in self.flags]


@dataclass
class PropertyInfo(_FlagSetMixin):
    """프로퍼티 정보"""
    KNOWN_FLAGS = PROPERTY_FLAGS

    name: str
    type: str
    offset: Optional[int] = None     # 분석기가 제공하는 값 (재계산하지 않음)
    flags: Set[str] = field(default_factory=set)

    # 메타데이터 (빈 문자열 = 없음)
    category: str = ""
    tooltip: str = ""
    default_value: str = ""
    clamp_min: str = ""
    clamp_max: str = ""

    # 소스 위치
    file_name: str = ""
    line_number: int = 0

    # GPROPERTY(...) 원본 인자 텍스트 (파싱 전)
    annotation: str = ""

    @property
    def canonical_type(self) -> str:
        return canonicalize_type(self.type)

    @property
    def save(self) -> bool:
        return 'Save' in self.flags

    @property
    def edit(self) -> bool:
        return 'Edit' in self.flags

    @property
    def transient(self) -> bool:
        return 'Transient' in self.flags

    @property
    def editor_only(self) -> bool:
        return 'EditorOnly' in self.flags

    @property
    def read_only(self) -> bool:
        return 'ReadOnly' in self.flags

    @property
    def is_serialized(self) -> bool:
        # Transient는 Save 여부와 관계없이 직렬화 제외
        return self.save and not self.transient

    @property
    def has_clamp(self) -> bool:
        return bool(self.clamp_min or self.clamp_max)


@dataclass
class FunctionInfo(_FlagSetMixin):
    """함수 정보"""
    KNOWN_FLAGS = FUNCTION_FLAGS

    name: str
    return_type: str = "void"
    parameters: List[str] = field(default_factory=list)
    parameter_types: List[str] = field(default_factory=list)
    flags: Set[str] = field(default_factory=set)

    category: str = ""
    tooltip: str = ""

    file_name: str = ""
    line_number: int = 0
    annotation: str = ""

    def __post_init__(self):
        if len(self.parameters) != len(self.parameter_types):
            raise ValueError(
                f"Function '{self.name}': {len(self.parameters)} parameter names "
                f"but {len(self.parameter_types)} parameter types"
            )

    def add_parameter(self, name: str, type_str: str):
        self.parameters.append(name)
        self.parameter_types.append(type_str)

    def parameter_pairs(self) -> Iterator[Tuple[str, str]]:
        """(이름, 타입) 쌍을 선언 순서대로 반환"""
        return zip(self.parameters, self.parameter_types)

    @property
    def callable(self) -> bool:
        return 'Callable' in self.flags

    @property
    def blueprint_event(self) -> bool:
        return 'BlueprintEvent' in self.flags

    @property
    def blueprint_callable(self) -> bool:
        return 'BlueprintCallable' in self.flags


@dataclass
class ClassInfo(_FlagSetMixin):
    """리플렉션 대상 클래스 정보"""
    KNOWN_FLAGS = CLASS_FLAGS

    name: str
    namespaces: List[str] = field(default_factory=list)  # 바깥쪽 네임스페이스부터
    base_class: str = ""  # 단일 상속만 지원, 없으면 빈 문자열
    kind: str = "class"   # "class" 또는 "struct"
    flags: Set[str] = field(default_factory=set)
    version: int = 1      # 직렬화 레이아웃 버전

    # 선언 순서 유지 (직렬화 레이아웃 / 등록 순서 결정)
    properties: List[PropertyInfo] = field(default_factory=list)
    functions: List[FunctionInfo] = field(default_factory=list)

    file_name: str = ""
    line_number: int = 0
    annotation: str = ""

    def __post_init__(self):
        if not self.name:
            raise ValueError("ClassInfo.name must not be empty")

    @property
    def qualified_name(self) -> str:
        return make_qualified_name(self.namespaces, self.name)

    @property
    def namespace_name(self) -> str:
        return SCOPE_SEPARATOR.join(self.namespaces)

    @property
    def blueprintable(self) -> bool:
        return 'Blueprintable' in self.flags

    @property
    def serializable(self) -> bool:
        return 'Serializable' in self.flags

    @property
    def abstract(self) -> bool:
        return 'Abstract' in self.flags

    @property
    def default_to_instanced(self) -> bool:
        return 'DefaultToInstanced' in self.flags

    def has_property(self, name: str) -> bool:
        return self.get_property(name) is not None

    def get_property(self, name: str) -> Optional[PropertyInfo]:
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None

    def has_function(self, name: str) -> bool:
        return self.get_function(name) is not None

    def get_function(self, name: str) -> Optional[FunctionInfo]:
        for func in self.functions:
            if func.name == name:
                return func
        return None

    def serialized_properties(self) -> List[PropertyInfo]:
        """직렬화 대상 프로퍼티 (선언 순서)"""
        return [prop for prop in self.properties if prop.is_serialized]


@dataclass
class ReflectionData:
    """소스 파일 하나의 리플렉션 정보"""
    file_name: str
    classes: List[ClassInfo] = field(default_factory=list)

    def get_class(self, name: str) -> Optional[ClassInfo]:
        for cls in self.classes:
            if cls.name == name or cls.qualified_name == name:
                return cls
        return None

    def has_class(self, name: str) -> bool:
        return self.get_class(name) is not None
