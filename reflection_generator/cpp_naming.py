"""
생성 코드용 C++ 이름 / 리터럴 유틸리티
"""

import hashlib
import re
from typing import List

from reflection_generator.reflection_ast import ClassInfo, PropertyInfo


_INVALID_IDENTIFIER_CHARS = re.compile(r'[^A-Za-z0-9_]+')

_ESCAPES = {
    '\\': '\\\\',
    '"': '\\"',
    '\n': '\\n',
    '\r': '\\r',
    '\t': '\\t',
}


def sanitize_identifier(text: str) -> str:
    """A::B::Foo -> A_B_Foo"""
    token = _INVALID_IDENTIFIER_CHARS.sub('_', text).strip('_')
    if not token or token[0].isdigit():
        token = f"_{token}"
    return token


def stable_hash(text: str, length: int = 8) -> str:
    """실행마다 같은 값이 나오는 짧은 해시 (hash()는 실행마다 달라짐)"""
    return hashlib.sha1(text.encode('utf-8')).hexdigest()[:length].upper()


def include_guard(qualified_name: str) -> str:
    """
    클래스 이름 기반 include guard
    파일 경로가 아닌 정규화된 이름 + 해시를 사용하므로
    다른 네임스페이스의 같은 이름 클래스와 충돌하지 않음
    """
    return f"GENERATED_REFLECTION_{sanitize_identifier(qualified_name).upper()}_{stable_hash(qualified_name)}"


def cpp_string_literal(text: str) -> str:
    """파이썬 문자열 -> C++ 문자열 리터럴"""
    escaped = ''.join(_ESCAPES.get(ch, ch) for ch in text)
    return f'"{escaped}"'


def flag_mask(enum_scope: str, flag_names: List[str]) -> str:
    """플래그 목록 -> Scope::A | Scope::B (없으면 Scope::None)"""
    if not flag_names:
        return f"{enum_scope}::None"
    return ' | '.join(f"{enum_scope}::{flag}" for flag in flag_names)


def global_name(class_info: ClassInfo, name: str) -> str:
    """클래스 네임스페이스 기준 전역 한정 이름 (::Game::Name)"""
    return '::' + '::'.join(class_info.namespaces + [name])


def reflection_struct_name(class_info: ClassInfo) -> str:
    return f"{class_info.name}Reflection"


def register_function_name(class_info: ClassInfo) -> str:
    """클래스별 등록 진입점 함수 이름 (클래스 네임스페이스 안에 선언)"""
    return f"Register{class_info.name}Reflection"


def body_macro_name(class_info: ClassInfo) -> str:
    return f"GENERATED_REFLECTION_BODY_{sanitize_identifier(class_info.qualified_name)}"


def accessor_suffix(prop: PropertyInfo) -> str:
    """health -> Health, m_bVisible -> M_bVisible"""
    return prop.name[0].upper() + prop.name[1:]
