"""
직렬화 코드 생성 모듈
Serializable 클래스에 대해 Serialize / Deserialize 함수를 생성합니다.
"""

from typing import Optional

from jinja2 import Template

from reflection_generator.config import GeneratorConfig
from reflection_generator.cpp_naming import reflection_struct_name
from reflection_generator.reflection_ast import ClassInfo


# 버전을 먼저 기록 -> 역직렬화 시 버전별 마이그레이션 가능
SERIALIZATION_TEMPLATE = """\
void {{ struct_name }}::Serialize(const {{ class_name }}& object, {{ rt }}::BinarySerializer& serializer)
{
    serializer.Write(static_cast<uint32_t>({{ version }}));
{% for name in fields %}
    serializer.Write(object.{{ name }});
{% endfor %}
}

bool {{ struct_name }}::Deserialize({{ class_name }}& object, {{ rt }}::BinaryDeserializer& deserializer)
{
    uint32_t version = 0;
    deserializer.Read(version);
    if (version > {{ version }})
    {
        return false;
    }
{% for name in fields %}
    deserializer.Read(object.{{ name }});
{% endfor %}
    return true;
}
"""


class SerializationGenerator:
    """Serialize / Deserialize 코드 생성기"""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()
        self.template = Template(SERIALIZATION_TEMPLATE, trim_blocks=True, lstrip_blocks=True,
                                 keep_trailing_newline=True)

    def generate(self, class_info: ClassInfo) -> str:
        """
        직렬화 함수 정의 생성 (Serializable이 아니면 빈 문자열)

        - Save 이고 Transient 가 아닌 프로퍼티만 선언 순서대로 기록
        - EditorOnly 는 직렬화에 영향 없음 (Transient 가 같이 있을 때만 제외)
        - ReadOnly 는 Setter 생성에만 영향
        """
        if not class_info.serializable:
            return ""

        return self.template.render(
            struct_name=reflection_struct_name(class_info),
            class_name=class_info.name,
            rt=self.config.runtime_prefix,
            version=class_info.version,
            fields=[prop.name for prop in class_info.serialized_properties()],
        )
