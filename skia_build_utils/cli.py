#!/usr/bin/env python3
"""
Skia Build Command Line

Builds Skia and the binding shim, and generates the bindings for a target.

Usage:
    skia-build build --features gl,textlayout
    skia-build args --target aarch64-linux-android --features vulkan
    skia-build defines build/skia
"""

import os
from pathlib import Path
from typing import List, Optional

import typer
from rich.panel import Panel

from .config import DEFINES_FILE_NAME, find_project_root, initialize_paths
from .definitions import from_features, load_definitions, to_compiler_flags
from .errors import BuildError, ToolFailedError
from .features import FeatureConfiguration
from .gn_args import synthesize
from .pipeline import Pipeline
from .target import TargetDescriptor, parse_target_for_host, target_from_environment
from .utils import console

app = typer.Typer(help="Build Skia and generate its bindings")


def _features(features: Optional[str], debug: bool, static_crt: bool, opt_level: Optional[str]) -> FeatureConfiguration:
    names: List[str] = features.split(",") if features else []
    try:
        return FeatureConfiguration.from_names(
            names, release=not debug, static_crt=static_crt, opt_level=opt_level
        )
    except ValueError as e:
        console.print(f"[red]{e}[/]")
        raise typer.Exit(code=1)


def _target(triple: Optional[str]) -> TargetDescriptor:
    try:
        if triple:
            return parse_target_for_host(triple)
        return target_from_environment(os.environ)
    except BuildError as e:
        console.print(f"[red]{e}[/]")
        raise typer.Exit(code=1)


def _fail(error: BuildError) -> None:
    console.print(f"[bold red]Error: {error}[/]")
    if isinstance(error, ToolFailedError) and error.output:
        console.out(error.output, highlight=False)
    raise typer.Exit(code=1)


@app.command()
def build(
    target: Optional[str] = typer.Option(
        None, "--target", "-t",
        help="Platform triple, defaults to $TARGET"
    ),
    features: Optional[str] = typer.Option(
        None, "--features", "-f",
        help="Comma separated features (e.g. gl,vulkan,textlayout)"
    ),
    project_root: Optional[Path] = typer.Option(
        None, "--project-root", "-p",
        help="Directory containing src/bindings.cpp"
    ),
    build_dir: Optional[Path] = typer.Option(
        None, "--build-dir", "-b",
        help="Build output directory"
    ),
    debug: bool = typer.Option(False, "--debug", help="Build Skia in debug configuration"),
    static_crt: bool = typer.Option(False, "--static-crt", help="Link the C runtime statically (MSVC)"),
    opt_level: Optional[str] = typer.Option(None, "--opt-level", "-O", help="Optimization level"),
    offline: bool = typer.Option(False, "--offline", help="Skip synchronizing Skia's dependencies"),
    gn: Optional[str] = typer.Option(None, "--gn", help="GN executable"),
    ninja: Optional[str] = typer.Option(None, "--ninja", help="Ninja executable"),
    export_binaries: Optional[Path] = typer.Option(
        None, "--export-binaries",
        help="Package the built binaries into this directory"
    ),
):
    """
    Build Skia, the binding shim, and the bindings.
    """
    feature_config = _features(features, debug, static_crt, opt_level)
    target_desc = _target(target)
    root = project_root.resolve() if project_root else find_project_root(Path.cwd())
    paths = initialize_paths(root, build_dir.resolve() if build_dir else None)

    console.print(Panel.fit("[bold]Skia Bindings Builder[/]", border_style="green"))
    console.print(f"Project root: {root}")

    pipeline = Pipeline(
        feature_config, target_desc, paths, offline=offline, gn=gn, ninja=ninja,
        export_dir=export_binaries.resolve() if export_binaries else None,
    )
    try:
        artifacts = pipeline.run()
    except BuildError as e:
        _fail(e)
        return

    for name, path in artifacts.items():
        console.print(f"[green]{name}:[/] {path}")


@app.command()
def args(
    target: Optional[str] = typer.Option(
        None, "--target", "-t",
        help="Platform triple, defaults to $TARGET"
    ),
    features: Optional[str] = typer.Option(
        None, "--features", "-f",
        help="Comma separated features"
    ),
    debug: bool = typer.Option(False, "--debug", help="Debug configuration"),
    static_crt: bool = typer.Option(False, "--static-crt", help="Link the C runtime statically (MSVC)"),
    opt_level: Optional[str] = typer.Option(None, "--opt-level", "-O", help="Optimization level"),
):
    """
    Print the GN arguments for a target without building.
    """
    arguments = synthesize(
        _features(features, debug, static_crt, opt_level),
        _target(target),
        os.environ,
    )
    console.print(f"[bold]Platform:[/] {arguments.platform}", highlight=False)
    for key, value in arguments.gn_args():
        console.print(f"{key}={value}", markup=False, highlight=False)
    if arguments.clang_args:
        console.print(f"[bold]Binding generator args:[/] {' '.join(arguments.clang_args)}", highlight=False)


@app.command()
def defines(
    output_dir: Path = typer.Argument(..., help="Skia output directory (contains obj/ or skia-defines.txt)"),
    textlayout: bool = typer.Option(False, "--textlayout", help="Include skshaper and skparagraph"),
):
    """
    Print the preprocessor definitions of a completed build.
    """
    saved = output_dir / DEFINES_FILE_NAME
    try:
        if (output_dir / "obj").is_dir():
            definitions = from_features(FeatureConfiguration(text_layout=textlayout), output_dir)
        elif saved.is_file():
            definitions = load_definitions(saved)
        else:
            console.print(f"[red]No build descriptors or {saved.name} in {output_dir}[/]")
            raise typer.Exit(code=1)
    except BuildError as e:
        _fail(e)
        return

    for flag in to_compiler_flags(definitions):
        console.print(flag, markup=False, highlight=False)


def main():
    app()


if __name__ == "__main__":
    main()
