from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable

import typer

from csvrecord.common.run_id import generate_run_id
from csvrecord.common.time import getDurationMs
from csvrecord.config import Settings, load_settings
from csvrecord.domain.exceptions import MissingMappingError, UnknownNameError
from csvrecord.domain.reporting.collector import ReportCollector
from csvrecord.infra.logging.setup import CommandLog
from csvrecord.infra.sources.csv_reader import CsvRecordSource
from csvrecord.infra.sources.csv_utils import CsvFormatError
from csvrecord.usecases.check_usecase import CheckUseCase
from csvrecord.usecases.column_usecase import ColumnUseCase
from csvrecord.usecases.export_usecase import ExportUseCase

app = typer.Typer(no_args_is_help=True, add_completion=False)

Runner = Callable[[CommandLog, ReportCollector], int]

def ensureDir(path: str) -> None:
    Path(path).mkdir(parents=True, exist_ok=True)

def decodeEscapes(value: str | None) -> str | None:
    """
    Назначение:
        Позволяет передать табуляцию как '\\t' в CLI.
    """
    if value == "\\t":
        return "\t"
    return value

def requireCsv(csvPath: str | None) -> None:
    """
    Назначение:
        Базовая проверка наличия CSV-файла.

    Поведение:
        - Если csvPath не задан или файл не существует — завершает процесс с exit code 2.
    """
    if not csvPath:
        typer.echo("ERROR: --csv is required", err=True)
        raise typer.Exit(code=2)

    p = Path(csvPath)
    if not p.exists() or not p.is_file():
        typer.echo(f"ERROR: CSV file not found: {csvPath}", err=True)
        raise typer.Exit(code=2)

def printRunHeader(runId: str, command: str, settings: Settings, sources: list[str]) -> None:
    """
    Назначение:
        Печатает сводку параметров запуска в stderr, не смешивая её с данными.
    """
    typer.echo(
        f"run_id={runId} command={command} "
        f"delimiter={settings.delimiter!r} has_header={settings.has_header} "
        f"comment_marker={settings.comment_marker!r} null_string={settings.null_string!r} "
        f"sources={sources} log_level={settings.log_level}",
        err=True,
    )

def runWithReport(
    ctx: typer.Context,
    commandName: str,
    csvPath: str | None,
    runner: Runner,
) -> None:
    """
    Назначение:
        Унифицированная обвязка выполнения команд:
        - создаёт лог команды (файл <command>_<runId>.log)
        - создаёт отчёт по записям
        - валидирует наличие CSV
        - переводит ошибки формата/чтения CSV в exit code 2
        - гарантирует запись отчёта и закрытие лога в finally
    """
    runId = ctx.obj["runId"]
    settings: Settings = ctx.obj["settings"]
    sources = ctx.obj["sources"]

    startMonotonic = time.monotonic()

    log = CommandLog(
        commandName=commandName,
        logDir=settings.log_dir,
        runId=runId,
        logLevel=settings.log_level,
    )

    report = ReportCollector(
        run_id=runId,
        command=commandName,
        csv_path=csvPath,
        items_limit=settings.report_items_limit,
        config_sources=sources,
    )

    exitCode: int | None = None

    try:
        log.event(logging.INFO, "core", "Command started")
        printRunHeader(runId, commandName, settings, sources)

        try:
            requireCsv(csvPath)
        except typer.Exit:
            log.event(logging.ERROR, "csv", "CSV is missing or not accessible")
            exitCode = 2
            return

        try:
            exitCode = runner(log, report)
        except CsvFormatError as exc:
            log.event(logging.ERROR, "csv", f"CSV format error: {exc}")
            typer.echo(f"ERROR: CSV format error: {exc}", err=True)
            exitCode = 2
        except OSError as exc:
            log.event(logging.ERROR, "csv", f"CSV read error: {exc}")
            typer.echo(f"ERROR: CSV read error: {exc}", err=True)
            exitCode = 2

    finally:
        durationMs = getDurationMs(startMonotonic, time.monotonic())
        report.finish(duration_ms=durationMs, log_file=log.path, report_dir=settings.report_dir)
        reportPath = report.write_json(settings.report_dir)
        log.event(logging.INFO, "report", f"Report written: {reportPath}")
        log.close()

        if exitCode:
            raise typer.Exit(code=exitCode)

def buildRecordSource(ctx: typer.Context, csvPath: str) -> CsvRecordSource:
    settings: Settings = ctx.obj["settings"]
    return CsvRecordSource(csvPath, settings.to_dialect())

def runInspectCommand(ctx: typer.Context, csvPath: str | None, limit: int | None) -> None:
    def execute(log, report) -> int:
        for record in buildRecordSource(ctx, csvPath):
            if limit is not None and report.summary.records_total >= limit:
                break
            report.count_record(record)
            typer.echo(str(record))
        return 0

    runWithReport(ctx=ctx, commandName="inspect", csvPath=csvPath, runner=execute)

def runCheckCommand(ctx: typer.Context, csvPath: str | None, strict: bool) -> None:
    def execute(log, report) -> int:
        code = CheckUseCase(strict=strict).run(
            record_source=buildRecordSource(ctx, csvPath),
            log=log,
            report=report,
        )
        summary = report.summary
        typer.echo(
            f"records={summary.records_total} consistent={summary.records_consistent} "
            f"inconsistent={summary.records_inconsistent}"
        )
        return code

    runWithReport(ctx=ctx, commandName="check", csvPath=csvPath, runner=execute)

def runColumnCommand(ctx: typer.Context, csvPath: str | None, name: str | None, index: int | None) -> None:
    if (name is None) == (index is None):
        typer.echo("ERROR: exactly one of --name or --index is required", err=True)
        raise typer.Exit(code=2)

    def emit(value: str | None) -> None:
        typer.echo("" if value is None else value)

    def execute(log, report) -> int:
        usecase = ColumnUseCase(name=name, index=index)
        try:
            return usecase.run(
                record_source=buildRecordSource(ctx, csvPath),
                emit=emit,
                log=log,
                report=report,
            )
        except (MissingMappingError, UnknownNameError) as exc:
            typer.echo(f"ERROR: {exc}", err=True)
            return 2

    runWithReport(ctx=ctx, commandName="column", csvPath=csvPath, runner=execute)

def runExportCommand(ctx: typer.Context, csvPath: str | None, outPath: str) -> None:
    def execute(log, report) -> int:
        code = ExportUseCase(out_path=outPath).run(
            record_source=buildRecordSource(ctx, csvPath),
            log=log,
            report=report,
        )
        typer.echo(f"exported={report.summary.records_total} out={outPath}")
        return code

    runWithReport(ctx=ctx, commandName="export", csvPath=csvPath, runner=execute)

@app.callback()
def main(
    ctx: typer.Context,
    config: str | None = typer.Option(None, "--config", help="Path to config.yml"),
    runId: str | None = typer.Option(None, "--run-id", help="Run identifier (UUID). If omitted, generated."),
    logLevel: str | None = typer.Option(None, "--log-level", help="Log level: ERROR|WARN|INFO|DEBUG"),
    logDir: str | None = typer.Option(None, "--log-dir", help="Directory for logs."),
    reportDir: str | None = typer.Option(None, "--report-dir", help="Directory for reports."),
    delimiter: str | None = typer.Option(None, "--delimiter", help="Field delimiter ('\\t' for tab)."),
    quotechar: str | None = typer.Option(None, "--quotechar", help="Quote character."),
    commentMarker: str | None = typer.Option(None, "--comment-marker", help="Prefix of comment lines."),
    nullString: str | None = typer.Option(None, "--null-string", help="Value that is read as null."),
    hasHeader: bool | None = typer.Option(None, "--csv-has-header/--csv-no-header", help="CSV includes header row"),
    trim: bool | None = typer.Option(None, "--trim/--no-trim", help="Strip whitespace around values"),
):
    """
    Назначение:
        Глобальная инициализация CLI:
        - генерирует/принимает run_id
        - загружает настройки (CLI > ENV > config > defaults)
        - создаёт каталоги log/report
        - сохраняет всё в ctx.obj для подкоманд
    """
    if not runId:
        runId = generate_run_id()

    cliOverrides = {
        "log_level": logLevel,
        "log_dir": logDir,
        "report_dir": reportDir,
        "delimiter": decodeEscapes(delimiter),
        "quotechar": quotechar,
        "comment_marker": commentMarker,
        "null_string": nullString,
        "has_header": hasHeader,
        "trim": trim,
    }
    try:
        loaded = load_settings(config_path=config, cli_overrides=cliOverrides)
    except ValueError as exc:
        typer.echo(f"ERROR: invalid settings: {exc}", err=True)
        raise typer.Exit(code=2)

    ensureDir(loaded.settings.log_dir)
    ensureDir(loaded.settings.report_dir)

    ctx.obj = {
        "runId": runId,
        "settings": loaded.settings,
        "sources": loaded.sources_used,
        "configPath": config,
    }

@app.command("inspect")
def inspectRecords(
    ctx: typer.Context,
    csv: str | None = typer.Option(None, "--csv", help="Path to input CSV"),
    limit: int | None = typer.Option(None, "--limit", help="Print at most N records"),
):
    runInspectCommand(ctx, csv, limit)

@app.command("check")
def checkRecords(
    ctx: typer.Context,
    csv: str | None = typer.Option(None, "--csv", help="Path to input CSV"),
    strict: bool = typer.Option(False, "--strict", help="Exit 1 if any record is inconsistent"),
):
    runCheckCommand(ctx, csv, strict)

@app.command("column")
def columnValues(
    ctx: typer.Context,
    csv: str | None = typer.Option(None, "--csv", help="Path to input CSV"),
    name: str | None = typer.Option(None, "--name", help="Header name of the column"),
    index: int | None = typer.Option(None, "--index", help="Zero-based column index"),
):
    runColumnCommand(ctx, csv, name, index)

@app.command("export")
def exportRecords(
    ctx: typer.Context,
    csv: str | None = typer.Option(None, "--csv", help="Path to input CSV"),
    out: str = typer.Option(..., "--out", help="Path to output JSON Lines file"),
):
    runExportCommand(ctx, csv, out)

if __name__ == "__main__":
    app()
