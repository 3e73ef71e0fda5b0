"""CLI entry point for binderbuild."""

from __future__ import annotations

import json
import os
import shlex
import time
from pathlib import Path

import click

from binderbuild import __version__
from binderbuild.bootstrap import register_bootstrap_steps
from binderbuild.build.build_log import build_log_context
from binderbuild.build.runner import CommandRunner
from binderbuild.core.config import ConfigManager
from binderbuild.core.exceptions import BinderBuildError, PipelineError
from binderbuild.core.health import HealthChecker
from binderbuild.core.pipeline import PipelineConfig, PipelineEngine
from binderbuild.core.registry import ComponentRegistry
from binderbuild.core.schema import BuildContext, BuildResult, StepResult
from binderbuild.reporters import register_builtin_reporters
from binderbuild.steps import register_builtin_steps


def _load_config_and_registry(project_root: Path | None = None) -> tuple[ConfigManager, ComponentRegistry]:
    """Load .env/YAML config and register built-in steps and reporters."""
    config = ConfigManager(project_root=project_root, use_os_environ=True)
    try:
        config.load()
    except BinderBuildError as e:
        raise click.ClickException(str(e)) from e
    registry = ComponentRegistry()
    register_builtin_steps(registry)
    register_bootstrap_steps(registry)
    register_builtin_reporters(registry)
    return config, registry


def _format_duration(seconds: float) -> str:
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}m {secs}s"


def _print_step_result(result: StepResult) -> None:
    if result.skipped:
        status = "SKIP"
    elif result.success:
        status = "OK"
    else:
        status = "FAIL"
    line = f"  {result.step_name}: {status}"
    if result.message:
        line += f" ({result.message.splitlines()[0]})"
    click.echo(line, err=not result.success)


def _print_build_summary(result: BuildResult, elapsed: float) -> None:
    executed = len(result.executed_steps)
    skipped = len(result.step_results) - executed
    status = "succeeded" if result.success else "failed"
    click.echo(
        f"Build {status} in {_format_duration(elapsed)}: {executed} step(s) run, {skipped} skipped.",
        err=not result.success,
    )
    if result.entrypoint:
        click.echo(f"Entrypoint: {result.entrypoint}")


def _run_pipeline(
    config: ConfigManager,
    registry: ComponentRegistry,
    *,
    title: str,
    steps: list[str],
    repo_path: Path | None,
    dry_run: bool,
    skip: tuple[str, ...] = (),
    log_file: Path | None = None,
    verbose: bool = False,
    echo: bool = True,
) -> tuple[BuildResult, str | None]:
    """Run the given steps; return the result and the abort message, if any."""
    settings = config.config
    runner = CommandRunner(
        env=settings.build_env(dict(os.environ)),
        dry_run=dry_run or settings.dry_run,
        timeout=settings.command_timeout,
    )
    ctx = BuildContext(
        repo_path=repo_path,
        config={"runner": runner, "settings": settings},
    )
    engine = PipelineEngine(
        registry,
        PipelineConfig(
            steps=steps,
            skip_steps=[*settings.pipeline.skip_steps, *skip],
            stop_on_failure=settings.pipeline.stop_on_failure,
        ),
    )
    error: str | None = None
    with build_log_context(log_file, verbose=verbose, echo=echo) as log:
        log.info("=== %s started ===", title)
        if repo_path is not None:
            log.info("repo_path=%s", repo_path)
        log.info("dry_run=%s", runner.dry_run)
        try:
            result = engine.run(ctx)
        except PipelineError as e:
            error = str(e)
            result = ctx.finalize()
        log.info("=== %s finished: %s ===", title, "success" if result.success else "failed")
    return result, error


def _finish(
    registry: ComponentRegistry,
    result: BuildResult,
    error: str | None,
    started: float,
    report_path: Path | None,
    log_file: Path | None,
) -> None:
    click.echo("Steps:")
    for step_result in result.step_results:
        _print_step_result(step_result)
    _print_build_summary(result, time.monotonic() - started)
    if report_path is not None:
        registry.get_reporter("json").report_build(result, report_path)
        click.echo(f"Report: {report_path}")
    if log_file is not None:
        click.echo(f"Build log: {log_file}", err=not result.success)
    if error:
        click.echo(error, err=True)
    if not result.success:
        raise SystemExit(1)


_dry_run_option = click.option("--dry-run", is_flag=True, help="Print what would run without executing anything.")
_log_file_option = click.option("--log-file", "log_file", type=click.Path(path_type=Path), help="Write the build log to this file.")
_verbose_option = click.option("--verbose", "-v", is_flag=True, help="Verbose log (DEBUG level, includes command output).")
_quiet_option = click.option("--quiet", "-q", is_flag=True, help="Do not echo build diagnostics to stderr.")
_report_option = click.option("--report", "report_path", type=click.Path(path_type=Path), help="Write a JSON build report to this file.")


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """binderbuild: build a notebook environment from a repository's binder files."""
    pass


@main.command()
@_dry_run_option
@_log_file_option
@_verbose_option
@_quiet_option
@_report_option
def base(dry_run: bool, log_file: Path | None, verbose: bool, quiet: bool, report_path: Path | None) -> None:
    """Set up the base environment: user, conda profile, base apt packages, Mambaforge."""
    config, registry = _load_config_and_registry()
    log_file = (log_file or Path.cwd() / "binderbuild-base.log").resolve()
    started = time.monotonic()
    result, error = _run_pipeline(
        config,
        registry,
        title="Base setup",
        steps=list(config.config.pipeline.bootstrap_steps),
        repo_path=None,
        dry_run=dry_run,
        log_file=log_file,
        verbose=verbose,
        echo=not quiet,
    )
    _finish(registry, result, error, started, report_path, log_file)


@main.command()
@click.option("--repo", "repo_path", required=True, type=click.Path(path_type=Path, exists=True, file_okay=False), help="Repository whose binder files drive the build.")
@click.option("--skip", "skip", multiple=True, help="Step name to leave out (repeatable).")
@_dry_run_option
@_log_file_option
@_verbose_option
@_quiet_option
@_report_option
def build(
    repo_path: Path,
    skip: tuple[str, ...],
    dry_run: bool,
    log_file: Path | None,
    verbose: bool,
    quiet: bool,
    report_path: Path | None,
) -> None:
    """Install apt, conda and pip packages, run postBuild and install the start script."""
    repo_path = repo_path.resolve()
    config, registry = _load_config_and_registry()
    log_file = (log_file or repo_path / "binderbuild-build.log").resolve()
    started = time.monotonic()
    result, error = _run_pipeline(
        config,
        registry,
        title="Build",
        steps=list(config.config.pipeline.steps),
        repo_path=repo_path,
        dry_run=dry_run,
        skip=skip,
        log_file=log_file,
        verbose=verbose,
        echo=not quiet,
    )
    _finish(registry, result, error, started, report_path, log_file)


@main.command()
@click.option("--repo", "repo_path", type=click.Path(path_type=Path, exists=True, file_okay=False), help="Repository to plan a build for.")
@click.option("--base", "plan_base", is_flag=True, help="Plan the base setup instead of the build.")
def plan(repo_path: Path | None, plan_base: bool) -> None:
    """Print the commands a build would run, in order, without running them."""
    if repo_path is None and not plan_base:
        raise click.UsageError("--repo is required unless --base is given")
    config, registry = _load_config_and_registry()
    settings = config.config
    result, error = _run_pipeline(
        config,
        registry,
        title="Plan",
        steps=list(settings.pipeline.bootstrap_steps if plan_base else settings.pipeline.steps),
        repo_path=repo_path.resolve() if repo_path else None,
        dry_run=True,
        echo=False,
    )
    for command in result.commands:
        click.echo(command)
    if error or not result.success:
        click.echo(error or "Plan failed.", err=True)
        raise SystemExit(1)


@main.command()
@click.option("--format", "fmt", type=click.Choice(["export", "json"]), default="export", show_default=True)
def env(fmt: str) -> None:
    """Print the environment variables exposed to build commands."""
    config, _ = _load_config_and_registry()
    settings = config.config
    variables = settings.build_env({"PATH": os.environ.get("PATH", "")})
    if fmt == "json":
        click.echo(
            json.dumps(
                {"env": variables, "port": settings.port, "entrypoint": settings.paths.start_path},
                indent=2,
            )
        )
        return
    for key, value in variables.items():
        click.echo(f"export {key}={shlex.quote(value)}")


@main.command()
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output (paths, suggestions).")
@click.option("--skip-apt", is_flag=True, help="Skip apt-get and wget checks.")
@click.option("--skip-conda", is_flag=True, help="Skip mamba and conda-lock checks.")
def check(verbose: bool, skip_apt: bool, skip_conda: bool) -> None:
    """Verify that the tools the build calls are installed."""
    config, _ = _load_config_and_registry()
    checker = HealthChecker(config=config)
    results = checker.check_all(skip_apt=skip_apt, skip_conda=skip_conda)
    all_ok = all(r.ok for r in results)
    for r in results:
        status = "OK" if r.ok else "FAIL"
        click.echo(f"  {r.name}: {status}")
        if verbose or not r.ok:
            click.echo(f"    {r.message}")
        if (verbose or not r.ok) and r.suggestion:
            click.echo(f"    → {r.suggestion}")
    if all_ok:
        click.echo("All checks passed.")
    else:
        click.echo("Some checks failed. Fix the issues above or follow the suggested steps.", err=True)
        raise SystemExit(1)


@main.group()
def steps() -> None:
    """Inspect build steps."""
    pass


@steps.command("list")
def steps_list() -> None:
    """List the build and base steps in the order they run."""
    config, registry = _load_config_and_registry()
    settings = config.config
    avail = registry.list_available()
    skipped = set(settings.pipeline.skip_steps)
    for label, names in (("Base", settings.pipeline.bootstrap_steps), ("Build", settings.pipeline.steps)):
        click.echo(f"{label} steps:")
        for name in names:
            if name not in avail["steps"]:
                click.echo(f"  {name} (unknown)")
                continue
            step = registry.get_step(name)
            trigger = f"when '{step.trigger}' exists" if step.trigger else "always"
            suffix = " [disabled]" if name in skipped else ""
            click.echo(f"  {name}: {trigger}{suffix}")


@main.command(context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False})
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def start(args: tuple[str, ...]) -> None:
    """Exec the installed start script (the container entrypoint) with ARGS."""
    config, _ = _load_config_and_registry()
    entrypoint = Path(config.config.paths.start_path)
    if not entrypoint.is_file():
        click.echo(
            f"No start script installed at {entrypoint}; add a 'start' file to the build context.",
            err=True,
        )
        raise SystemExit(1)
    os.execv(str(entrypoint), [str(entrypoint), *args])


if __name__ == "__main__":
    main()
