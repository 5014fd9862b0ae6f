import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.traceback import install
from rich.tree import Tree

from .cluster import HTTPResourceSource, ResourceSource, StaticResourceSource, validate_kinds
from .config import load_config, resolve_token
from .decorators import handle_cluster_errors
from .vfs import ClusterVFS, DirectoryNode, Node

# Initialize Rich Traceback for better error messages
install(show_locals=False)

# Initialize Rich Console
console = Console()
err_console = Console(stderr=True)

# Configure logging to use Rich's RichHandler
logging.basicConfig(
    level=logging.INFO,  # Set to INFO by default, DEBUG if verbose
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)]
)
logger = logging.getLogger(__name__)

app = typer.Typer(help="Browse Kubernetes cluster state as a read-only filesystem")


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose mode"),
):
    """
    kubefs - mount a snapshot of a Kubernetes cluster as a read-only filesystem.

    Namespaces become directories, resource kinds become subdirectories and
    every object becomes a YAML file.
    """
    if verbose or load_config().cli.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Verbose mode enabled")


# Shared source options
ClusterUrlOption = typer.Option(None, "--cluster-url", "-c", help="API server URL (default: from config)")
TokenOption = typer.Option(None, "--token", "-t", help="Bearer token (default: $KUBE_TOKEN)")
TokenFileOption = typer.Option(None, "--token-file", help="Read the bearer token from a file")
KindOption = typer.Option(None, "--kind", "-k", help="Resource kind to project (repeatable, e.g. -k configmaps -k secrets)")
FromFileOption = typer.Option(None, "--from-file", "-f", help="Use a YAML dump instead of a live cluster")
InsecureOption = typer.Option(False, "--insecure", help="Skip TLS certificate verification")


def _open_source(
    cluster_url: Optional[str],
    token: Optional[str],
    token_file: Optional[Path],
    from_file: Optional[Path],
    insecure: bool,
) -> ResourceSource:
    """Create the resource source selected by the command-line options."""
    if from_file is not None:
        return StaticResourceSource.from_file(from_file)

    cluster = load_config().cluster
    return HTTPResourceSource(
        base_url=cluster_url or cluster.url,
        token=resolve_token(token, str(token_file) if token_file else None, cluster),
        verify=False if insecure else cluster.tls_verify(),
        timeout=cluster.timeout,
        retries=cluster.retries,
    )


def _take_snapshot(
    cluster_url: Optional[str],
    token: Optional[str],
    token_file: Optional[Path],
    kind: Optional[List[str]],
    from_file: Optional[Path],
    insecure: bool,
) -> ClusterVFS:
    """Build a snapshot and report any build warnings."""
    kinds = validate_kinds(kind or load_config().mount.kinds)

    with _open_source(cluster_url, token, token_file, from_file, insecure) as source:
        vfs = ClusterVFS.build(source, kinds)

    for warning in vfs.tree.warnings:
        err_console.print(f"[yellow]Warning:[/yellow] {escape(str(warning))}")
    return vfs


def _details(node: Node) -> str:
    """Format a node's extra metadata as space-separated key=value pairs."""
    parts = []
    for key, value in node.get_info().items():
        if key in ("type", "name", "path") or value is None:
            continue
        if isinstance(value, list):
            value = ",".join(str(v) for v in value) or "-"
        parts.append(f"{key}={value}")
    return " ".join(parts)


@app.command()
def about():
    """Display information about kubefs."""
    console.print("[bold cyan]kubefs - Kubernetes as a filesystem[/bold cyan]")
    console.print("")
    console.print("Takes one snapshot of a cluster and serves it read-only:")
    console.print("  /<namespace>/<kind>/<name>.yaml   Full object definition")
    console.print("  /<namespace>/manifest.yaml        Summary of the namespace")
    console.print("")
    console.print("[bold]Commands:[/bold]")
    console.print("  kubefs mount <dir>      Mount the snapshot (FUSE)")
    console.print("  kubefs unmount <dir>    Unmount it")
    console.print("  kubefs ls [path]        List a directory without mounting")
    console.print("  kubefs cat <path>       Print a file without mounting")
    console.print("  kubefs tree [path]      Show the tree without mounting")
    console.print("  kubefs config           View or edit configuration")


@app.command()
@handle_cluster_errors
def mount(
    mountpoint: Optional[Path] = typer.Argument(None, help="Directory to mount on (default: from config)"),
    cluster_url: Optional[str] = ClusterUrlOption,
    token: Optional[str] = TokenOption,
    token_file: Optional[Path] = TokenFileOption,
    kind: Optional[List[str]] = KindOption,
    from_file: Optional[Path] = FromFileOption,
    insecure: bool = InsecureOption,
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="FUSE worker threads"),
    debug: bool = typer.Option(False, "--debug", help="Enable FUSE debug output"),
    allow_other: bool = typer.Option(False, "--allow-other", help="Let other users access the mount"),
):
    """
    Snapshot the cluster and mount it as a read-only filesystem.

    Blocks until the filesystem is unmounted.

    Example:
        kubefs mount /mnt/cluster -c https://10.0.0.1:6443 -k configmaps -k secrets
    """
    mount_config = load_config().mount
    if mountpoint is None:
        if not mount_config.mountpoint:
            err_console.print("[red]Error: No mountpoint given and none configured (kubefs config --mountpoint DIR)[/red]")
            raise typer.Exit(code=1)
        mountpoint = Path(mount_config.mountpoint).expanduser()

    if not mountpoint.is_dir():
        err_console.print(f"[red]Error: Mountpoint {escape(str(mountpoint))} is not a directory[/red]")
        raise typer.Exit(code=1)

    from .fs import FilesystemAdapter
    from .fs.mount import mount_filesystem

    vfs = _take_snapshot(cluster_url, token, token_file, kind, from_file, insecure)
    adapter = FilesystemAdapter(vfs.tree, vfs.renderer, uid=mount_config.uid, gid=mount_config.gid)

    console.print(
        f"[green]✓ Snapshot ready: {len(vfs.root.namespaces())} namespaces, "
        f"{len(vfs.tree.inodes)} entries[/green]"
    )
    console.print(f"Mounting at {escape(str(mountpoint))} (unmount with 'kubefs unmount {escape(str(mountpoint))}')")
    mount_filesystem(
        adapter,
        str(mountpoint),
        workers=workers or mount_config.workers,
        debug=debug or mount_config.debug,
        allow_other=allow_other or mount_config.allow_other,
    )


@app.command()
@handle_cluster_errors
def unmount(
    mountpoint: Path = typer.Argument(..., help="Mounted directory"),
):
    """Unmount a kubefs filesystem."""
    from .fs.mount import unmount_filesystem

    unmount_filesystem(str(mountpoint))
    console.print(f"[green]✓ Unmounted {escape(str(mountpoint))}[/green]")


@app.command(name="ls")
@handle_cluster_errors
def ls(
    path: str = typer.Argument("/", help="Path inside the snapshot"),
    cluster_url: Optional[str] = ClusterUrlOption,
    token: Optional[str] = TokenOption,
    token_file: Optional[Path] = TokenFileOption,
    kind: Optional[List[str]] = KindOption,
    from_file: Optional[Path] = FromFileOption,
    insecure: bool = InsecureOption,
    long: bool = typer.Option(False, "--long", "-l", help="Show details for each entry"),
):
    """
    List a directory of the snapshot without mounting it.

    Examples:
        kubefs ls /
        kubefs ls /kube-system/configmaps -f cluster-dump.yaml
        kubefs ls -l /default
    """
    vfs = _take_snapshot(cluster_url, token, token_file, kind, from_file, insecure)

    node = vfs.get_node(path)
    if node is None:
        err_console.print(f"[red]ls: {escape(path)}: No such file or directory[/red]")
        raise typer.Exit(code=1)

    nodes = vfs.ls(path) if isinstance(node, DirectoryNode) else [node]

    table = Table(title=node.get_path())
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Type")
    table.add_column("Inode", justify="right")
    table.add_column("Size", justify="right")
    if long:
        table.add_column("Details")

    for child in nodes:
        name = child.name + "/" if isinstance(child, DirectoryNode) else child.name
        row = [
            escape(name),
            child.node_type.value,
            str(vfs.inode_of(child)),
            str(vfs.size_of(child)),
        ]
        if long:
            row.append(escape(_details(child)))
        table.add_row(*row)

    console.print(table)


@app.command()
@handle_cluster_errors
def cat(
    path: str = typer.Argument(..., help="File inside the snapshot"),
    cluster_url: Optional[str] = ClusterUrlOption,
    token: Optional[str] = TokenOption,
    token_file: Optional[Path] = TokenFileOption,
    kind: Optional[List[str]] = KindOption,
    from_file: Optional[Path] = FromFileOption,
    insecure: bool = InsecureOption,
):
    """
    Print a file of the snapshot without mounting it.

    Example:
        kubefs cat /default/configmaps/kube-root-ca.crt.yaml
    """
    vfs = _take_snapshot(cluster_url, token, token_file, kind, from_file, insecure)

    node = vfs.get_node(path)
    if node is None or isinstance(node, DirectoryNode):
        err_console.print(f"[red]{escape(vfs.cat(path))}[/red]")
        raise typer.Exit(code=1)

    typer.echo(vfs.cat(path), nl=False)


@app.command()
@handle_cluster_errors
def tree(
    path: str = typer.Argument("/", help="Subtree to show"),
    cluster_url: Optional[str] = ClusterUrlOption,
    token: Optional[str] = TokenOption,
    token_file: Optional[Path] = TokenFileOption,
    kind: Optional[List[str]] = KindOption,
    from_file: Optional[Path] = FromFileOption,
    insecure: bool = InsecureOption,
):
    """Show the snapshot as a tree."""
    vfs = _take_snapshot(cluster_url, token, token_file, kind, from_file, insecure)

    if vfs.get_node(path) is None:
        err_console.print(f"[red]tree: {escape(path)}: No such file or directory[/red]")
        raise typer.Exit(code=1)

    branches = {}
    rendered: Optional[Tree] = None
    for depth, node in vfs.walk(path):
        label = escape(node.name + "/" if isinstance(node, DirectoryNode) else node.name)
        if rendered is None:
            rendered = Tree(f"[bold]{escape(node.get_path())}[/bold]")
            branch = rendered
        else:
            branch = branches[depth - 1].add(label)
        branches[depth] = branch

    console.print(rendered)


@app.command()
def config(
    show: bool = typer.Option(False, "--show", help="Show current configuration"),
    init: bool = typer.Option(False, "--init", help="Initialize config file with defaults"),
    set_cluster_url: Optional[str] = typer.Option(None, "--cluster-url", help="Set default API server URL"),
    set_token_file: Optional[str] = typer.Option(None, "--token-file", help="Set default token file"),
    set_verify_tls: Optional[bool] = typer.Option(None, "--verify-tls/--no-verify-tls", help="Verify API server certificates"),
    set_ca_file: Optional[str] = typer.Option(None, "--ca-file", help="Set CA bundle for the API server"),
    set_kinds: Optional[str] = typer.Option(None, "--kinds", help="Set default kinds (comma-separated)"),
    set_workers: Optional[int] = typer.Option(None, "--workers", help="Set default FUSE worker threads"),
    set_mountpoint: Optional[str] = typer.Option(None, "--mountpoint", help="Set default mountpoint"),
    set_verbose: Optional[bool] = typer.Option(None, "--cli-verbose/--no-cli-verbose", help="Enable verbose output by default"),
):
    """
    View or edit kubefs configuration.

    Configuration is stored at ~/.config/kubefs/config.json (or ~/.kubefs/config.json).

    Examples:
        kubefs config --show
        kubefs config --cluster-url https://10.0.0.1:6443 --kinds configmaps,secrets
        kubefs config --mountpoint ~/cluster
    """
    from .config import ensure_config_exists, get_config_path, update_config

    if init:
        config_path = ensure_config_exists()
        console.print(f"[green]Configuration initialized at {escape(str(config_path))}[/green]")
        return

    has_settings = any([
        set_cluster_url, set_token_file, set_verify_tls is not None, set_ca_file,
        set_kinds, set_workers, set_mountpoint, set_verbose is not None,
    ])

    if has_settings:
        kinds = None
        if set_kinds is not None:
            try:
                kinds = validate_kinds(set_kinds.split(","))
            except ValueError as e:
                err_console.print(f"[red]Error: {escape(str(e))}[/red]")
                raise typer.Exit(code=1)
        update_config(
            cluster_url=set_cluster_url,
            token_file=set_token_file,
            verify_tls=set_verify_tls,
            ca_file=set_ca_file,
            kinds=kinds,
            workers=set_workers,
            mountpoint=set_mountpoint,
            verbose=set_verbose,
        )
        console.print(f"[green]Configuration saved to {escape(str(get_config_path()))}[/green]")
        if not show:
            return

    current = load_config()
    console.print("\n[bold]kubefs Configuration[/bold]")
    console.print(f"[dim]Location: {escape(str(get_config_path()))}[/dim]\n")

    console.print("[bold cyan]Cluster Settings:[/bold cyan]")
    console.print(f"  URL:         {escape(current.cluster.url)}")
    console.print(f"  Token:       {'set' if current.cluster.token else '[dim]not set[/dim]'}")
    console.print(f"  Token File:  {escape(current.cluster.token_file) if current.cluster.token_file else '[dim]not set[/dim]'}")
    console.print(f"  Verify TLS:  {current.cluster.verify_tls}")
    console.print(f"  Timeout:     {current.cluster.timeout}s")

    console.print("\n[bold cyan]Mount Settings:[/bold cyan]")
    console.print(f"  Mountpoint:  {escape(current.mount.mountpoint) if current.mount.mountpoint else '[dim]not set[/dim]'}")
    console.print(f"  Kinds:       {', '.join(current.mount.kinds) or '[dim]none[/dim]'}")
    console.print(f"  Workers:     {current.mount.workers}")
    console.print(f"  Allow Other: {current.mount.allow_other}")


if __name__ == "__main__":
    app()
