import pytest

from reflection_generator.annotation_parser import apply_annotations
from reflection_generator.diagnostics import InputError
from reflection_generator.header_analyzer import (
    HeaderAnalyzer,
    preprocess_source,
    split_top_level,
)


def analyze(source, diagnostics=None):
    return HeaderAnalyzer().analyze_source(source, "Test.h", diagnostics)


def test_player_skeleton(player_source):
    data = analyze(player_source)

    assert len(data.classes) == 1
    player = data.classes[0]
    assert player.qualified_name == 'Game::Player'
    assert player.base_class == 'Actor'
    assert player.kind == 'class'
    assert player.annotation == 'Serializable, Version=3'
    assert player.line_number == 7

    assert [prop.name for prop in player.properties] == ['health', 'cachedSpeed', 'bShowGizmo']
    health = player.properties[0]
    assert health.type == 'int'
    assert health.annotation == 'Save, Edit, Clamp(0,100)'
    assert health.line_number == 12
    assert health.offset is None

    take_damage = player.functions[0]
    assert take_damage.name == 'TakeDamage'
    assert take_damage.return_type == 'void'
    assert list(take_damage.parameter_pairs()) == [('amount', 'int')]


def test_nested_and_compound_namespaces():
    source = """
namespace Engine { namespace Core::Math {
GCLASS()
struct Vector3 { GPROPERTY(Save) float x; };
} }

namespace {
GCLASS()
class Hidden {};
}

GCLASS()
class Global {};
"""
    data = analyze(source)
    names = [cls.qualified_name for cls in data.classes]
    assert names == ['Engine::Core::Math::Vector3', 'Hidden', 'Global']
    assert data.classes[0].kind == 'struct'


def test_comments_and_directives_are_ignored():
    source = """
// GCLASS(Serializable) class Commented {};
/* GCLASS()
   class Block {}; */
#define GCLASS(...)
GCLASS(Blueprintable)
class Real
{
    // GPROPERTY(Save) int ignored;
    GPROPERTY(Save) int kept;
};
"""
    data = analyze(source)
    assert [cls.name for cls in data.classes] == ['Real']
    assert data.classes[0].line_number == 6
    assert [prop.name for prop in data.classes[0].properties] == ['kept']


def test_first_base_only_and_export_macro():
    source = """
GCLASS()
class ENGINE_API Pawn final : public ::Core::Object, public IControllable
{
};
"""
    cls = analyze(source).classes[0]
    assert cls.name == 'Pawn'
    assert cls.base_class == 'Core::Object'


def test_members_of_nested_types_are_skipped():
    source = """
GCLASS()
class Outer
{
    struct Inner
    {
        GPROPERTY(Save) int innerValue;
    };

    GPROPERTY(Save) int outerValue;

    void Helper() { int local = 0; }

    GFUNCTION(Callable) int Compute(const std::map<int, float>& table, float scale = 1.0f, bool);
};
"""
    cls = analyze(source).classes[0]
    assert [prop.name for prop in cls.properties] == ['outerValue']

    compute = cls.functions[0]
    assert compute.return_type == 'int'
    assert list(compute.parameter_pairs()) == [
        ('table', 'const std::map<int, float>&'),
        ('scale', 'float'),
        ('param2', 'bool'),
    ]


def test_function_specifiers_stripped():
    source = """
GCLASS()
class Actor
{
    GFUNCTION(BlueprintEvent) virtual void Tick(float deltaTime) override;
    GFUNCTION() static Actor* Spawn(void);
};
"""
    cls = analyze(source).classes[0]
    tick, spawn = cls.functions
    assert tick.return_type == 'void'
    assert list(tick.parameter_pairs()) == [('deltaTime', 'float')]
    assert spawn.return_type == 'Actor*'
    assert spawn.parameters == []


def test_template_and_mutable_properties():
    source = """
GCLASS()
class Inventory
{
    GPROPERTY(Save) std::map<std::string, int> counts;
    GPROPERTY(Transient) mutable int cache = 0;
};
"""
    props = analyze(source).classes[0].properties
    assert [(prop.name, prop.type) for prop in props] == [
        ('counts', 'std::map<std::string, int>'),
        ('cache', 'int'),
    ]


def test_unsupported_declarations_become_warnings():
    source = """
GCLASS()
class Config
{
    GPROPERTY(Save) static int s_Count;
};

GCLASS(Serializable)
enum class NotAClass { A, B };
"""
    diagnostics = []
    data = analyze(source, diagnostics)

    assert [cls.name for cls in data.classes] == ['Config']
    assert data.classes[0].properties == []
    assert [diag.severity for diag in diagnostics] == ['warning', 'warning']
    assert diagnostics[0].line_number == 5


def test_unbalanced_class_annotation_keeps_completed_flags():
    source = """
GCLASS(Blueprintable, Version=2, Meta(a
class Foo {};
"""
    diagnostics = []
    data = analyze(source, diagnostics)

    assert [cls.name for cls in data.classes] == ['Foo']
    assert data.classes[0].annotation == 'Blueprintable, Version=2'
    assert len(diagnostics) == 1
    assert diagnostics[0].is_error
    assert diagnostics[0].line_number == 2

    assert apply_annotations(data) == []
    assert data.classes[0].blueprintable
    assert data.classes[0].version == 2


def test_unterminated_member_annotation_keeps_member():
    source = """
GCLASS(Serializable)
class Stats
{
    GPROPERTY(Save, Category("Combat)
    int health;
    GPROPERTY(Save) int mana;
};
"""
    diagnostics = []
    data = analyze(source, diagnostics)
    apply_annotations(data)

    stats = data.classes[0]
    assert [(prop.name, prop.save) for prop in stats.properties] == [('health', True), ('mana', True)]
    assert stats.properties[0].category == ''
    assert [prop.name for prop in stats.serialized_properties()] == ['health', 'mana']
    assert [(diag.severity, diag.line_number) for diag in diagnostics] == [('error', 5)]


def test_nested_gclass_is_skipped_with_warning():
    source = """
namespace Game
{
class Outer
{
    GCLASS()
    struct Inner { GPROPERTY(Save) int x; };
};

GCLASS()
class Sibling
{
    GCLASS()
    struct Detail {};
};
}
"""
    diagnostics = []
    data = analyze(source, diagnostics)

    assert [cls.qualified_name for cls in data.classes] == ['Game::Sibling']
    assert [(diag.severity, diag.line_number) for diag in diagnostics] == [('warning', 6), ('warning', 13)]


def test_unreadable_file_raises_input_error(tmp_path):
    with pytest.raises(InputError):
        HeaderAnalyzer().analyze(tmp_path / 'Missing.h')


def test_analyze_reads_file(player_header):
    data = HeaderAnalyzer().analyze(player_header)
    assert data.file_name == str(player_header)
    assert data.classes[0].file_name == str(player_header)


def test_preprocess_keeps_line_count():
    source = "/* a\n b */\n#define X \\\n  1\nint y;\n"
    assert preprocess_source(source).count('\n') == source.count('\n')


def test_split_top_level():
    assert split_top_level('std::map<int, float> a, int b') == ['std::map<int, float> a', 'int b']
    assert split_top_level('') == []
