import pytest

from reflection_generator.annotation_parser import apply_annotations
from reflection_generator.header_analyzer import HeaderAnalyzer


PLAYER_HEADER = """\
#pragma once
#include "Actor.h"

namespace Game
{
    // 플레이어 캐릭터
    GCLASS(Serializable, Version=3)
    class Player : public Actor
    {
        GENERATED_REFLECTION_BODY_Game_Player()
    public:
        GPROPERTY(Save, Edit, Clamp(0,100))
        int health = 100;

        GPROPERTY(Save, Transient)
        float cachedSpeed;

        GPROPERTY(Save, EditorOnly, Category("Debug"))
        bool bShowGizmo;

        GFUNCTION(Callable)
        void TakeDamage(int amount);
    };
}
"""


@pytest.fixture
def player_source():
    return PLAYER_HEADER


@pytest.fixture
def player_header(tmp_path):
    path = tmp_path / "Player.h"
    path.write_text(PLAYER_HEADER, encoding='utf-8')
    return path


@pytest.fixture
def player_data():
    data = HeaderAnalyzer().analyze_source(PLAYER_HEADER, "Player.h")
    assert apply_annotations(data) == []
    return data


@pytest.fixture
def player_class(player_data):
    return player_data.classes[0]
