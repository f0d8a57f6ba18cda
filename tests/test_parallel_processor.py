import pytest

from reflection_generator.config import GeneratorConfig
from reflection_generator.parallel_processor import (
    FileTask,
    ParallelProcessor,
    process_single_file,
    unique_files,
)


def make_headers(directory, count):
    directory.mkdir(parents=True, exist_ok=True)
    paths = []
    for index in range(count):
        path = directory / f"Component{index}.h"
        path.write_text(
            "namespace Game\n{\n"
            "GCLASS(Serializable)\n"
            f"class Component{index} : public Component\n{{\n"
            "    GPROPERTY(Save, Edit) int value;\n"
            "};\n}\n",
            encoding='utf-8'
        )
        paths.append(path)
    return paths


def read_outputs(directory):
    return {path.name: path.read_bytes() for path in sorted(directory.iterdir())}


def test_parallel_and_sequential_agree(tmp_path):
    files = make_headers(tmp_path / 'Source', 6)

    sequential = ParallelProcessor(GeneratorConfig(output_dir=tmp_path / 'Seq', num_processes=1)).process(files)
    parallel = ParallelProcessor(GeneratorConfig(output_dir=tmp_path / 'Par', num_processes=2)).process(files)

    expected = [f"Game::Component{index}" for index in range(6)]
    assert [cls.qualified_name for cls in sequential.classes] == expected
    assert [cls.qualified_name for cls in parallel.classes] == expected
    assert read_outputs(tmp_path / 'Seq') == read_outputs(tmp_path / 'Par')
    assert parallel.error_count == 0
    assert parallel.files_processed == 6


def test_small_batch_writes_registration(tmp_path, player_header):
    batch = ParallelProcessor(GeneratorConfig(output_dir=tmp_path / 'Out')).process([player_header])

    assert batch.registration_path == tmp_path / 'Out' / 'ReflectionRegistration.generated.cpp'
    text = batch.registration_path.read_text(encoding='utf-8')
    assert '::Game::RegisterPlayerReflection();' in text
    assert len(batch.files[0].written) == 2


def test_missing_file_does_not_abort_batch(tmp_path, player_header):
    missing = tmp_path / 'Missing.h'
    batch = ParallelProcessor(GeneratorConfig(output_dir=tmp_path / 'Out')).process([missing, player_header])

    assert [result.analyzed for result in batch.files] == [False, True]
    assert batch.files_processed == 1
    assert batch.error_count == 1
    assert batch.diagnostics[0].category == 'input'
    assert [cls.name for cls in batch.classes] == ['Player']


def test_annotation_error_still_generates(tmp_path):
    header = tmp_path / 'Broken.h'
    header.write_text(
        "GCLASS(Serializable, Version=abc)\n"
        "class Broken\n{\n    GPROPERTY(Save) int x;\n};\n",
        encoding='utf-8'
    )
    batch = ParallelProcessor(GeneratorConfig(output_dir=tmp_path / 'Out')).process([header])

    assert batch.error_count == 1
    assert batch.diagnostics[0].line_number == 1
    broken = batch.classes[0]
    assert broken.serializable
    assert broken.version == 1
    assert (tmp_path / 'Out' / 'Broken.generated.cpp').exists()


def test_duplicate_inputs_processed_once(tmp_path, player_header):
    assert unique_files([player_header, player_header]) == [player_header]
    batch = ParallelProcessor(GeneratorConfig(output_dir=tmp_path / 'Out')).process([player_header, player_header])
    assert len(batch.files) == 1


def test_same_stem_in_different_directories(tmp_path):
    first = make_headers(tmp_path / 'Engine', 1)[0]
    second = make_headers(tmp_path / 'Game', 1)[0]

    ParallelProcessor(GeneratorConfig(output_dir=tmp_path / 'Out')).process([first, second])

    headers = sorted(path.name for path in (tmp_path / 'Out').glob('*.generated.h'))
    assert len(headers) == 2
    assert headers[0] == 'Component0.generated.h'
    assert headers[1].startswith('Component0_')


def test_empty_batch_writes_nothing(tmp_path):
    batch = ParallelProcessor(GeneratorConfig(output_dir=tmp_path / 'Out')).process([])
    assert batch.files == []
    assert batch.registration_path is None
    assert not (tmp_path / 'Out').exists()


def test_worker_requires_initialization(player_header):
    with pytest.raises(RuntimeError):
        process_single_file(FileTask(path=player_header, stem='Player'))
