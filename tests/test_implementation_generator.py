from reflection_generator.implementation_generator import ImplementationGenerator
from reflection_generator.reflection_ast import ClassInfo, FunctionInfo, PropertyInfo


def test_player_registration(player_class):
    text = ImplementationGenerator().generate(player_class)

    assert 'void RegisterPlayerReflection()' in text
    assert '"Game::Player",\n        "Actor",\n        ::Engine::Core::GClass::Flags::Serializable,\n        3,' in text
    assert ('type.AddProperty("health", "int", offsetof(Player, health),\n'
            '        ::Engine::Core::GProperty::Flags::Save | ::Engine::Core::GProperty::Flags::Edit)\n'
            '        .SetClamp("0", "100");') in text
    assert '.SetCategory("Debug")' in text
    assert ('type.AddFunction("TakeDamage", "void", { { "amount", "int" } },\n'
            '        ::Engine::Core::GFunction::Flags::Callable);') in text


def test_one_descriptor_per_member(player_class):
    text = ImplementationGenerator().generate(player_class)
    assert text.count('type.AddProperty(') == 3
    assert text.count('type.AddFunction(') == 1
    assert text.count('registry.RegisterType(') == 1


def test_no_base_and_no_flags():
    cls = ClassInfo('Plain', functions=[FunctionInfo('Reset')])
    text = ImplementationGenerator().generate(cls)
    assert '        nullptr,\n        ::Engine::Core::GClass::Flags::None,\n        1,' in text
    assert 'type.AddFunction("Reset", "void", {},\n        ::Engine::Core::GFunction::Flags::None);' in text
    assert 'Serialize' not in text


def test_known_offset_and_canonical_type():
    prop = PropertyInfo('texture', 'class UTexture *', offset=16, tooltip='Line "one"\nLine two')
    cls = ClassInfo('Material', properties=[prop])
    text = ImplementationGenerator().generate(cls)
    assert 'type.AddProperty("texture", "UTexture*", 16,' in text
    assert '.SetTooltip("Line \\"one\\"\\nLine two")' in text


def test_setters_skip_read_only():
    cls = ClassInfo('Stats', properties=[
        PropertyInfo('level', 'int', flags={'ReadOnly'}),
        PropertyInfo('name', 'std::string'),
    ])
    text = ImplementationGenerator().generate(cls)
    assert 'StatsReflection::SetLevel' not in text
    assert 'void StatsReflection::SetName(Stats& object, const std::string& value)' in text


def test_generate_file_includes(player_class):
    text = ImplementationGenerator().generate_file([player_class], 'Game/Player.h', 'Player.generated.h')
    assert '#include "Player.h"\n#include "Player.generated.h"\n' in text


def test_generation_is_deterministic(player_class):
    generator = ImplementationGenerator()
    assert generator.generate(player_class) == generator.generate(player_class)
