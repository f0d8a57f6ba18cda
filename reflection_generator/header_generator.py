"""
리플렉션 헤더(.generated.h) 코드 생성 모듈
클래스별 include guard, 네임스페이스 체인, 리플렉션 접근자 선언을 생성합니다.
"""

from pathlib import Path
from typing import List, Optional

from jinja2 import Template

from reflection_generator.config import GeneratorConfig
from reflection_generator.cpp_naming import (
    accessor_suffix,
    body_macro_name,
    cpp_string_literal,
    global_name,
    include_guard,
    reflection_struct_name,
    register_function_name,
)
from reflection_generator.reflection_ast import ClassInfo


HEADER_FILE_TEMPLATE = """\
// Generated by reflection-generator from {{ source_name }}. Do not edit.
#pragma once

{% for include in includes %}
#include "{{ include }}"
{% endfor %}
{% for fragment in fragments %}

{{ fragment }}
{% endfor %}
"""


CLASS_HEADER_TEMPLATE = """\
// {{ qualified_name }}
#ifndef {{ guard }}
#define {{ guard }}

// The body macro leaves the access specifier at private.
#define {{ body_macro }}() \\
    friend struct {{ struct_global }}; \\
    friend void {{ register_function }}(); \\
public: \\
    const {{ rt }}::GType* GetType() const { return {{ struct_global }}::StaticType(); } \\
    static const char* GetClassName() { return {{ qualified_literal }}; } \\
private:

{% for ns in namespaces %}
namespace {{ ns }} {
{% endfor %}
{% if namespaces %}

{% endif %}
{{ kind }} {{ class_name }};

struct {{ struct_name }}
{
    static const {{ rt }}::GType* StaticType();
{% for prop in properties %}

    static const {{ prop.type }}& Get{{ prop.suffix }}(const {{ class_name }}& object);
{% if prop.writable %}
    static void Set{{ prop.suffix }}({{ class_name }}& object, const {{ prop.type }}& value);
{% endif %}
{% endfor %}
{% if serializable %}

    static void Serialize(const {{ class_name }}& object, {{ rt }}::BinarySerializer& serializer);
    static bool Deserialize({{ class_name }}& object, {{ rt }}::BinaryDeserializer& deserializer);
{% endif %}
};

void {{ register_function }}();
{% if namespaces %}

{% endif %}
{% for ns in namespaces|reverse %}
} // namespace {{ ns }}
{% endfor %}

#endif // {{ guard }}"""


def _make_template(source: str) -> Template:
    return Template(source, trim_blocks=True, lstrip_blocks=True, keep_trailing_newline=True)


class HeaderGenerator:
    """리플렉션 헤더 생성기"""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()
        self.file_template = _make_template(HEADER_FILE_TEMPLATE)
        self.class_template = _make_template(CLASS_HEADER_TEMPLATE)

    def generate(self, class_info: ClassInfo) -> str:
        """ClassInfo 하나에 대한 헤더 조각 생성"""
        # ReadOnly 프로퍼티는 Setter 없음
        properties = [
            {
                'type': prop.type,
                'suffix': accessor_suffix(prop),
                'writable': not prop.read_only,
            }
            for prop in class_info.properties
        ]

        return self.class_template.render(
            qualified_name=class_info.qualified_name,
            qualified_literal=cpp_string_literal(class_info.qualified_name),
            guard=include_guard(class_info.qualified_name),
            body_macro=body_macro_name(class_info),
            struct_global=global_name(class_info, reflection_struct_name(class_info)),
            namespaces=class_info.namespaces,
            kind=class_info.kind,
            class_name=class_info.name,
            struct_name=reflection_struct_name(class_info),
            register_function=register_function_name(class_info),
            rt=self.config.runtime_prefix,
            properties=properties,
            serializable=class_info.serializable,
        )

    def generate_file(self, classes: List[ClassInfo], source_name: str) -> str:
        """소스 파일 하나의 모든 클래스 헤더 조각을 합친 .generated.h 내용"""
        return self.file_template.render(
            source_name=Path(source_name).name,
            includes=self.config.runtime_includes,
            fragments=[self.generate(class_info).rstrip('\n') for class_info in classes],
        )
