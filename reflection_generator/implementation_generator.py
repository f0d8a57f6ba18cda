"""
리플렉션 구현(.generated.cpp) 코드 생성 모듈
타입 / 프로퍼티 / 함수 등록 코드와 접근자 구현을 생성합니다.
"""

from pathlib import Path
from typing import List, Optional

from jinja2 import Template

from reflection_generator.config import GeneratorConfig
from reflection_generator.cpp_naming import (
    accessor_suffix,
    cpp_string_literal,
    flag_mask,
    reflection_struct_name,
    register_function_name,
)
from reflection_generator.reflection_ast import ClassInfo, FunctionInfo, PropertyInfo
from reflection_generator.serialization_generator import SerializationGenerator


IMPLEMENTATION_FILE_TEMPLATE = """\
// Generated by reflection-generator from {{ source_name }}. Do not edit.
#include <cstddef>
#include <cstdint>

#include "{{ source_name }}"
#include "{{ generated_header }}"
{% for fragment in fragments %}

{{ fragment }}
{% endfor %}
"""


CLASS_IMPLEMENTATION_TEMPLATE = """\
// {{ qualified_name }}
{% for ns in namespaces %}
namespace {{ ns }} {
{% endfor %}
{% if namespaces %}

{% endif %}
const {{ rt }}::GType* {{ struct_name }}::StaticType()
{
    return {{ rt }}::TypeRegistry::Get().FindType({{ qualified_literal }});
}
{% for prop in properties %}

const {{ prop.type }}& {{ struct_name }}::Get{{ prop.suffix }}(const {{ class_name }}& object)
{
    return object.{{ prop.name }};
}
{% if prop.writable %}

void {{ struct_name }}::Set{{ prop.suffix }}({{ class_name }}& object, const {{ prop.type }}& value)
{
    object.{{ prop.name }} = value;
}
{% endif %}
{% endfor %}
{% if serialization %}

{{ serialization }}
{%- endif %}

void {{ register_function }}()
{
    {{ rt }}::TypeRegistry& registry = {{ rt }}::TypeRegistry::Get();
    {{ rt }}::GType& type = registry.RegisterType(
        {{ qualified_literal }},
        {{ base_literal }},
        {{ class_flags }},
        {{ version }},
        sizeof({{ class_name }}));
{% for prop in properties %}

    type.AddProperty({{ prop.name_literal }}, {{ prop.type_literal }}, {{ prop.offset }},
        {{ prop.flags }}){{ prop.metadata }};
{% endfor %}
{% for func in functions %}

    type.AddFunction({{ func.name_literal }}, {{ func.return_literal }}, {{ func.parameters }},
        {{ func.flags }}){{ func.metadata }};
{% endfor %}
}
{% if namespaces %}

{% endif %}
{% for ns in namespaces|reverse %}
} // namespace {{ ns }}
{% endfor %}"""


def _metadata_chain(calls: List[str]) -> str:
    """메타데이터 설정 호출 체인 (비어 있는 값은 생략)"""
    return ''.join(f"\n        .{call}" for call in calls)


class ImplementationGenerator:
    """리플렉션 등록 코드 생성기"""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()
        options = dict(trim_blocks=True, lstrip_blocks=True, keep_trailing_newline=True)
        self.file_template = Template(IMPLEMENTATION_FILE_TEMPLATE, **options)
        self.class_template = Template(CLASS_IMPLEMENTATION_TEMPLATE, **options)
        self.serialization_generator = SerializationGenerator(self.config)

    def _property_info(self, class_info: ClassInfo, prop: PropertyInfo) -> dict:
        rt = self.config.runtime_prefix

        # 분석기가 오프셋을 주지 못한 경우 컴파일러에게 계산을 맡김
        if prop.offset is not None:
            offset = str(prop.offset)
        else:
            offset = f"offsetof({class_info.name}, {prop.name})"

        calls = []
        if prop.category:
            calls.append(f"SetCategory({cpp_string_literal(prop.category)})")
        if prop.tooltip:
            calls.append(f"SetTooltip({cpp_string_literal(prop.tooltip)})")
        if prop.has_clamp:
            calls.append(f"SetClamp({cpp_string_literal(prop.clamp_min)}, {cpp_string_literal(prop.clamp_max)})")
        if prop.default_value:
            calls.append(f"SetDefault({cpp_string_literal(prop.default_value)})")

        return {
            'name': prop.name,
            'type': prop.type,
            'suffix': accessor_suffix(prop),
            'writable': not prop.read_only,
            'name_literal': cpp_string_literal(prop.name),
            'type_literal': cpp_string_literal(prop.canonical_type),
            'offset': offset,
            'flags': flag_mask(f"{rt}::GProperty::Flags", prop.ordered_flags()),
            'metadata': _metadata_chain(calls),
        }

    def _function_info(self, func: FunctionInfo) -> dict:
        rt = self.config.runtime_prefix

        pairs = [
            f"{{ {cpp_string_literal(name)}, {cpp_string_literal(type_str)} }}"
            for name, type_str in func.parameter_pairs()
        ]
        parameters = f"{{ {', '.join(pairs)} }}" if pairs else "{}"

        calls = []
        if func.category:
            calls.append(f"SetCategory({cpp_string_literal(func.category)})")
        if func.tooltip:
            calls.append(f"SetTooltip({cpp_string_literal(func.tooltip)})")

        return {
            'name_literal': cpp_string_literal(func.name),
            'return_literal': cpp_string_literal(func.return_type),
            'parameters': parameters,
            'flags': flag_mask(f"{rt}::GFunction::Flags", func.ordered_flags()),
            'metadata': _metadata_chain(calls),
        }

    def generate(self, class_info: ClassInfo) -> str:
        """ClassInfo 하나에 대한 구현 조각 생성"""
        rt = self.config.runtime_prefix
        base_literal = cpp_string_literal(class_info.base_class) if class_info.base_class else "nullptr"

        return self.class_template.render(
            qualified_name=class_info.qualified_name,
            qualified_literal=cpp_string_literal(class_info.qualified_name),
            namespaces=class_info.namespaces,
            class_name=class_info.name,
            struct_name=reflection_struct_name(class_info),
            register_function=register_function_name(class_info),
            rt=rt,
            base_literal=base_literal,
            class_flags=flag_mask(f"{rt}::GClass::Flags", class_info.ordered_flags()),
            version=class_info.version,
            properties=[self._property_info(class_info, prop) for prop in class_info.properties],
            functions=[self._function_info(func) for func in class_info.functions],
            serialization=self.serialization_generator.generate(class_info),
        )

    def generate_file(self, classes: List[ClassInfo], source_name: str, generated_header: str) -> str:
        """소스 파일 하나의 모든 클래스 구현 조각을 합친 .generated.cpp 내용"""
        return self.file_template.render(
            source_name=Path(source_name).name,
            generated_header=generated_header,
            fragments=[self.generate(class_info).rstrip('\n') for class_info in classes],
        )
