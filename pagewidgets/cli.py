"""CLI entrypoints for rendering pages and tabular inputs."""

import logging
import webbrowser
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .config import Config, ConfigError, load_config
from .content import MenuLoadError, load_menu
from .forms import UnknownWidgetError, build_row_endpoint, render_widget_page
from .pages import ArticleViewRenderer, render_document
from .server import PreviewApp, make_request_handler, serve
from .templates import TemplateAssets
from .themes import ThemeError

console = Console()
app = typer.Typer(help="Render page menus and tabular input widgets.")

ConfigPathOption = Annotated[
    str,
    typer.Option("--config", "-c", help="Path to configuration file or project directory."),
]
OutputOption = Annotated[
    Path | None,
    typer.Option("--output", "-o", help="Write the HTML to this file instead of stdout."),
]
AdminFlag = Annotated[
    bool,
    typer.Option("--admin", help="Render admin-only controls."),
]


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging."),
    ] = False,
) -> None:
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.command("render-menu")
def render_menu(
    menu_file: Annotated[
        Path,
        typer.Argument(..., help="Menu definition (YAML or JSON)."),
    ],
    config_path: ConfigPathOption = ".",
    admin: AdminFlag = False,
    fragment: Annotated[
        bool,
        typer.Option("--fragment", help="Emit only the page body, without the layout."),
    ] = False,
    output: OutputOption = None,
) -> None:
    """Render a menu page with its articles."""
    config = _load(config_path)
    try:
        menu = load_menu(menu_file)
    except MenuLoadError as exc:
        console.print(f"[bold red]Cannot load menu[/]: {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    assets = _assets(config)
    page = ArticleViewRenderer(assets, is_admin=lambda: admin or config.admin_access).render(menu)
    html = page.content if fragment else render_document(assets, page)
    _emit(html, output, f"menu '{menu.title}'")


@app.command("render-widget")
def render_widget(
    name: Annotated[str, typer.Argument(..., help="Widget name from the configuration.")],
    config_path: ConfigPathOption = ".",
    ajax: Annotated[
        bool,
        typer.Option("--ajax", help="Render as a partial response with the script inline."),
    ] = False,
    output: OutputOption = None,
) -> None:
    """Render a configured tabular input inside its form page."""
    config = _load(config_path)
    assets = _assets(config)
    try:
        page = render_widget_page(assets, name, ajax=ajax)
    except UnknownWidgetError as exc:
        _unknown_widget(config, name)
        raise typer.Exit(code=1) from exc
    html = page.content if ajax else render_document(assets, page)
    _emit(html, output, f"widget '{name}'")


@app.command()
def row(
    name: Annotated[str, typer.Argument(..., help="Widget name from the configuration.")],
    index: Annotated[int, typer.Option("--index", "-i", min=0, help="Index of the new row.")],
    param: Annotated[
        list[str] | None,
        typer.Option("--param", "-p", help="Extra view data as key=value (repeatable)."),
    ] = None,
    config_path: ConfigPathOption = ".",
) -> None:
    """Print the markup the row-fetch endpoint returns for a new row."""
    config = _load(config_path)
    assets = _assets(config)
    query: dict[str, str] = {}
    for entry in param or []:
        key, separator, value = entry.partition("=")
        if not separator or not key:
            raise typer.BadParameter(f"Expected key=value, got '{entry}'.", param_hint="--param")
        query[key] = value
    query["index"] = str(index)

    try:
        endpoint = build_row_endpoint(assets, name)
    except UnknownWidgetError as exc:
        _unknown_widget(config, name)
        raise typer.Exit(code=1) from exc

    response = endpoint.handle(query)
    if not response.ok:
        console.print(f"[bold red]Row rejected[/] ({response.status}): {escape(response.body)}")
        raise typer.Exit(code=1)
    typer.echo(response.body)


@app.command("serve")
def serve_command(
    config_path: ConfigPathOption = ".",
    host: Annotated[str, typer.Option("--host", help="Interface to bind.")] = "127.0.0.1",
    port: Annotated[int, typer.Option("--port", "-p", min=0, max=65535, help="Port to listen on.")] = 8000,
    admin: AdminFlag = False,
    open_browser: Annotated[
        bool,
        typer.Option("--open", help="Open the index page in a browser."),
    ] = False,
) -> None:
    """Serve menu pages, widget forms and row endpoints for local preview."""
    config = _load(config_path)
    try:
        preview = PreviewApp(config, admin=admin or None)
    except ThemeError as exc:
        console.print(f"[bold red]Theme error[/]: {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    handler = make_request_handler(preview)
    try:
        with serve(host, port, handler) as server:
            bound_port = int(server.server_address[1])
            url = f"http://{host}:{bound_port}{config.base_url}/"
            console.print(f"[bold green]Preview[/]: serving on {url} (Ctrl+C to stop)")
            if open_browser:
                webbrowser.open(url)
            try:
                server.serve_forever()
            except KeyboardInterrupt:
                console.print("[bold yellow]Preview stopped[/].")
    except OSError as exc:
        console.print(f"[bold red]Cannot start preview[/]: {escape(str(exc))}")
        raise typer.Exit(code=1) from exc


def _load(path: str) -> Config:
    try:
        return load_config(path)
    except FileNotFoundError as exc:
        raise typer.BadParameter(f"Config file not found: {path}") from exc
    except ConfigError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _assets(config: Config) -> TemplateAssets:
    try:
        return TemplateAssets(config)
    except ThemeError as exc:
        console.print(f"[bold red]Theme error[/]: {escape(str(exc))}")
        raise typer.Exit(code=1) from exc


def _unknown_widget(config: Config, name: str) -> None:
    known = ", ".join(sorted(config.widgets)) or "none configured"
    console.print(f"[bold red]Unknown widget[/] '{escape(name)}' (available: {escape(known)}).")


def _emit(html: str, output: Path | None, label: str) -> None:
    if output is None:
        typer.echo(html)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(html, encoding="utf-8")
    console.print(f"[bold green]Rendered[/] {label} to {output}")


if __name__ == "__main__":
    app()
