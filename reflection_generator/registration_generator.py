"""
리플렉션 등록 집계 코드 생성 모듈
배치 전체의 클래스 등록 함수를 프로세스 시작 시 한 번씩 호출하는 파일을 생성합니다.
"""

from typing import List, Tuple

from jinja2 import Template

from reflection_generator.cpp_naming import global_name, register_function_name
from reflection_generator.reflection_ast import ClassInfo


REGISTRATION_TEMPLATE = """\
// Generated by reflection-generator. Do not edit.
// Registers {{ entries|length }} reflected class(es) in discovery order.
// Base classes are resolved lazily by the type registry.
{% for entry in entries %}

{% for ns in entry.namespaces %}
namespace {{ ns }} {
{% endfor %}
void {{ entry.function }}();
{% for ns in entry.namespaces|reverse %}
} // namespace {{ ns }}
{% endfor %}
{% endfor %}

namespace
{
struct GeneratedReflectionRegistrar
{
    GeneratedReflectionRegistrar()
    {
{% for entry in entries %}
        {{ entry.call }}();
{% endfor %}
    }
};

const GeneratedReflectionRegistrar s_GeneratedReflectionRegistrar;
}
"""


class RegistrationGenerator:
    """등록 집계 파일 생성기"""

    def __init__(self):
        self.template = Template(REGISTRATION_TEMPLATE, trim_blocks=True, lstrip_blocks=True,
                                 keep_trailing_newline=True)

    @staticmethod
    def unique_classes(classes: List[ClassInfo]) -> Tuple[List[ClassInfo], List[ClassInfo]]:
        """
        정규화된 이름 기준 중복 제거 (처음 발견된 것 유지)

        Returns:
            (등록할 클래스 목록, 중복으로 제외된 클래스 목록)
        """
        seen = set()
        unique = []
        duplicates = []
        for class_info in classes:
            if class_info.qualified_name in seen:
                duplicates.append(class_info)
                continue
            seen.add(class_info.qualified_name)
            unique.append(class_info)
        return unique, duplicates

    def generate(self, classes: List[ClassInfo]) -> str:
        """발견 순서대로 각 클래스의 등록 함수를 정확히 한 번씩 호출하는 코드 생성"""
        unique, _ = self.unique_classes(classes)

        entries = [
            {
                'namespaces': class_info.namespaces,
                'function': register_function_name(class_info),
                'call': global_name(class_info, register_function_name(class_info)),
            }
            for class_info in unique
        ]

        return self.template.render(entries=entries)
