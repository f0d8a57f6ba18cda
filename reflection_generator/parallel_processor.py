"""
병렬 리플렉션 처리 모듈
파일 하나 = 작업 하나 (분석 -> 인자 파싱 -> 코드 생성 -> 기록) 를
멀티프로세싱으로 동시에 처리하고, 전부 끝난 뒤 등록 집계 파일을 기록합니다.
"""

from dataclasses import dataclass, field
from multiprocessing import Pool, cpu_count
from pathlib import Path
from typing import List, Optional, Sequence

from reflection_generator.annotation_parser import apply_annotations
from reflection_generator.code_generator import CodeGenerator, plan_output_names
from reflection_generator.config import GeneratorConfig
from reflection_generator.diagnostics import Diagnostic, InputError, Reporter
from reflection_generator.header_analyzer import HeaderAnalyzer
from reflection_generator.reflection_ast import ClassInfo


# 파일이 이보다 적으면 병렬화 오버헤드가 더 큼
MIN_PARALLEL_FILES = 4


@dataclass(frozen=True)
class FileTask:
    """워커에 전달되는 작업 (pickle 가능)"""
    path: Path
    stem: str


@dataclass
class FileResult:
    """파일 하나의 처리 결과 (워커 -> 메인 프로세스)"""
    file_name: str
    classes: List[ClassInfo] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    written: List[Path] = field(default_factory=list)
    analyzed: bool = False


@dataclass
class BatchResult:
    """배치 전체 결과 (입력 파일 순서 유지)"""
    files: List[FileResult] = field(default_factory=list)
    registration_path: Optional[Path] = None
    registration_diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def classes(self) -> List[ClassInfo]:
        return [class_info for result in self.files for class_info in result.classes]

    @property
    def diagnostics(self) -> List[Diagnostic]:
        collected = [diag for result in self.files for diag in result.diagnostics]
        return collected + self.registration_diagnostics

    @property
    def files_processed(self) -> int:
        return sum(1 for result in self.files if result.analyzed)

    @property
    def error_count(self) -> int:
        return sum(1 for diag in self.diagnostics if diag.is_error)


# 워커 프로세스마다 한 번만 생성해서 재사용
_worker_analyzer: Optional[HeaderAnalyzer] = None
_worker_generator: Optional[CodeGenerator] = None


def _init_worker(config: GeneratorConfig):
    """
    멀티프로세싱 워커 초기화 함수
    각 워커 프로세스가 시작될 때 한 번만 호출됨
    """
    global _worker_analyzer, _worker_generator
    _worker_analyzer = HeaderAnalyzer()
    _worker_generator = CodeGenerator(config)


def run_file_task(task: FileTask, analyzer: HeaderAnalyzer, generator: CodeGenerator) -> FileResult:
    """
    파일 하나 처리 (순차 / 병렬 공통)

    입력 에러와 출력 에러는 진단으로 바꿔 결과에 담고, 예외를 밖으로 던지지 않습니다.
    """
    result = FileResult(file_name=str(task.path))

    try:
        data = analyzer.analyze(task.path, result.diagnostics)
    except InputError as e:
        result.diagnostics.append(e.to_diagnostic())
        return result

    result.analyzed = True

    # 인자 문법 에러가 있어도 에러 이전까지 파싱된 플래그로 코드 생성
    result.diagnostics.extend(apply_annotations(data))
    result.classes = data.classes

    written, output_diagnostics = generator.write_file_outputs(data, task.stem)
    result.written = written
    result.diagnostics.extend(output_diagnostics)

    return result


def process_single_file(task: FileTask) -> FileResult:
    """멀티프로세싱용 함수 (전역 워커 인스턴스 사용)"""
    if _worker_analyzer is None or _worker_generator is None:
        raise RuntimeError("Worker not initialized. Call _init_worker first.")
    return run_file_task(task, _worker_analyzer, _worker_generator)


def unique_files(files: Sequence[Path]) -> List[Path]:
    """같은 파일이 여러 번 지정되면 처음 것만 유지 (순서 유지)"""
    seen = set()
    result = []
    for path in files:
        key = Path(path).resolve()
        if key in seen:
            continue
        seen.add(key)
        result.append(Path(path))
    return result


class ParallelProcessor:
    """병렬 리플렉션 처리기"""

    def __init__(self, config: Optional[GeneratorConfig] = None, reporter: Optional[Reporter] = None):
        """
        Args:
            config: 코드 생성 설정 (num_processes가 None이면 CPU 코어 수만큼)
            reporter: 로그 출력 (None이면 출력 없음)
        """
        self.config = config or GeneratorConfig()
        self.reporter = reporter or Reporter(verbose=False)
        self.num_processes = self.config.num_processes or cpu_count()

    def process(self, files: Sequence[Path]) -> BatchResult:
        """
        여러 헤더 파일을 처리하고 등록 집계 파일 기록

        Args:
            files: 처리할 헤더 파일 목록

        Returns:
            BatchResult (파일 결과는 입력 순서와 같음)
        """
        files = unique_files(files)
        batch = BatchResult()
        if not files:
            return batch

        names = plan_output_names(files)
        tasks = [FileTask(path=path, stem=names[str(path)]) for path in files]

        if len(tasks) < MIN_PARALLEL_FILES or self.num_processes <= 1:
            self.reporter.info("ParallelProcessor",
                               f"File count ({len(tasks)}) is small or jobs=1, using single process")
            batch.files = self._process_sequential(tasks)
        else:
            batch.files = self._process_parallel(tasks)

        # 모든 작업이 끝난 뒤 (join) 발견 순서대로 집계
        classes = batch.classes
        generator = CodeGenerator(self.config)
        batch.registration_path, batch.registration_diagnostics = generator.write_registration(classes)

        self.reporter.info("ParallelProcessor",
                           f"Processed {len(tasks)} files, {len(classes)} classes")
        return batch

    def _process_parallel(self, tasks: List[FileTask]) -> List[FileResult]:
        self.reporter.info("ParallelProcessor",
                           f"Processing {len(tasks)} files with {self.num_processes} processes...")

        try:
            with Pool(processes=self.num_processes, initializer=_init_worker,
                      initargs=(self.config,)) as pool:
                return pool.map(process_single_file, tasks)
        except (OSError, RuntimeError) as e:
            self.reporter.report(Diagnostic(
                "warning", "input", f"Parallel processing failed ({e}), falling back to sequential processing"))
            return self._process_sequential(tasks)

    def _process_sequential(self, tasks: List[FileTask]) -> List[FileResult]:
        """순차 처리 (소규모 배치 / 폴백용)"""
        analyzer = HeaderAnalyzer()
        generator = CodeGenerator(self.config)

        results = []
        for task in tasks:
            self.reporter.info("ParallelProcessor", f"Processing: {task.path}")
            results.append(run_file_task(task, analyzer, generator))
        return results
