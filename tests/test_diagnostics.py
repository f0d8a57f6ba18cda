import io

from reflection_generator.cpp_naming import (
    cpp_string_literal,
    flag_mask,
    sanitize_identifier,
    stable_hash,
)
from reflection_generator.diagnostics import (
    AnnotationValueError,
    Diagnostic,
    OutputError,
    Reporter,
)


def test_diagnostic_format():
    assert Diagnostic('error', 'input', 'boom', 'A.h', 3).format() == 'A.h:3: error: boom'
    assert Diagnostic('warning', 'output', 'hm', 'A.h').format() == 'A.h: warning: hm'
    assert Diagnostic('error', 'input', 'x').format() == '<unknown>: error: x'


def test_error_to_diagnostic():
    diag = AnnotationValueError('bad', file_name='A.h', line_number=2).to_diagnostic()
    assert diag == Diagnostic('error', 'annotation', 'bad', 'A.h', 2)
    assert OutputError('x').to_diagnostic().category == 'output'


def test_reporter_counts_and_verbosity():
    out, err = io.StringIO(), io.StringIO()
    reporter = Reporter(verbose=False, stream=out, error_stream=err)

    reporter.info('FileScanner', 'hidden')
    reporter.report_all([Diagnostic('error', 'input', 'a'), Diagnostic('warning', 'input', 'b')])
    reporter.summary(2, 3, 'Build/Generated')

    assert '[FileScanner]' not in out.getvalue()
    assert err.getvalue().count('\n') == 2
    assert 'Classes generated: 3' in out.getvalue()
    assert 'Errors: 1, Warnings: 1' in out.getvalue()

    Reporter(verbose=True, stream=out).info('FileScanner', 'shown')
    assert '[FileScanner] shown' in out.getvalue()


def test_naming_helpers():
    assert sanitize_identifier('A::B::Foo') == 'A_B_Foo'
    assert sanitize_identifier('1st') == '_1st'
    assert stable_hash('Game::Player') == stable_hash('Game::Player')
    assert len(stable_hash('x', 6)) == 6
    assert cpp_string_literal('a"b\\c\n') == '"a\\"b\\\\c\\n"'
    assert flag_mask('F', []) == 'F::None'
    assert flag_mask('F', ['A', 'B']) == 'F::A | F::B'
