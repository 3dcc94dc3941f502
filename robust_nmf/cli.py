"""
cli.py - Rich Command Line Interface for robust_nmf

Builds NMF test matrices from the shell. Matrices are exchanged as ``.npz``
archives holding at least an ``X`` array.

Usage:
    robust-nmf --help
    robust-nmf generate 200 100 --rank 10 --seed 42 --output clean.npz
    robust-nmf corrupt clean.npz --noise-std 0.05 --outlier-fraction 0.02 -o noisy.npz
    robust-nmf normalize noisy.npz --mode column_max -o scaled.npz
    robust-nmf load-images faces/ --pattern .png -o faces.npz
    robust-nmf info noisy.npz
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional
from enum import Enum

import numpy as np
import typer
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from .types import RobustNMFError

# Initialize Typer app and Rich console
app = typer.Typer(
    name="robust-nmf",
    help="🧪 robust_nmf: Test data for non-negative matrix factorization",
    add_completion=False,
    rich_markup_mode="rich",
)
console = Console()


# =============================================================================
# ENUMS FOR CLI OPTIONS
# =============================================================================

class ModeChoice(str, Enum):
    """Normalization modes."""
    none = "none"
    global_max = "global_max"
    column_max = "column_max"


class OutlierChoice(str, Enum):
    """Outlier semantics."""
    additive = "additive"
    replace = "replace"


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def load_matrix(path: Path) -> np.ndarray:
    """Load the X matrix from an .npz archive."""
    if not path.exists():
        console.print(f"[red]Error:[/red] File not found: {path}")
        raise typer.Exit(1)

    with np.load(path) as data:
        if "X" not in data:
            console.print(f"[red]Error:[/red] No 'X' array in {path}")
            raise typer.Exit(1)
        return np.array(data["X"], dtype=np.float64)


def fail(error: RobustNMFError) -> None:
    """Report a library error and exit with status 1."""
    console.print(f"[red]Error:[/red] {error}")
    raise typer.Exit(1)


def print_matrix_summary(X: np.ndarray, title: str = "Matrix Summary"):
    """Print a rich summary of a data matrix."""
    table = Table(title=title, box=box.ROUNDED, show_header=False, title_style="bold cyan")
    table.add_column("Property", style="dim")
    table.add_column("Value", style="bold")

    table.add_row("Shape", f"{X.shape[0]} × {X.shape[1]}")
    if X.size:
        table.add_row("Min", f"{X.min():.6g}")
        table.add_row("Max", f"{X.max():.6g}")
        table.add_row("Mean", f"{X.mean():.6g}")
        table.add_row("Negative entries", str(int((X < 0).sum())))
        table.add_row("Zero entries", f"{(X == 0).mean():.1%}")

    console.print(table)


# =============================================================================
# COMMANDS
# =============================================================================

@app.command()
def generate(
    rows: int = typer.Argument(..., help="Number of rows of X"),
    cols: int = typer.Argument(..., help="Number of columns of X"),
    rank: int = typer.Option(10, "--rank", "-r", help="Inner dimension of W and H"),
    noise_std: float = typer.Option(0.0, "--noise-std", "-n", help="Gaussian noise level (clipped at zero)"),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Random seed for reproducibility"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output .npz (default: synthetic_<rows>x<cols>_r<rank>.npz)"),
):
    """
    Generate X = W·H with non-negative uniform factors.

    Example:
        robust-nmf generate 200 100 --rank 10 --seed 42
    """
    from robust_nmf import generate_synthetic_data

    console.print(Panel.fit("🔧 [bold]Synthetic Data Generation[/bold]", border_style="blue"))

    try:
        data = generate_synthetic_data(rows, cols, rank=rank, noise_std=noise_std, rng=seed)
    except RobustNMFError as e:
        fail(e)

    print_matrix_summary(data.X, title="Generated X")

    if output is None:
        output = Path(f"synthetic_{rows}x{cols}_r{rank}.npz")
    np.savez(output, X=data.X, W=data.W, H=data.H)
    console.print(f"\n  💾 Saved to: [bold]{output}[/bold]")


@app.command()
def corrupt(
    input_file: Path = typer.Argument(..., help="Input .npz containing X"),
    noise_std: float = typer.Option(0.0, "--noise-std", "-n", help="Gaussian noise level"),
    outlier_fraction: float = typer.Option(0.0, "--outlier-fraction", "-f", help="Fraction of entries hit by outliers"),
    outlier_scale: float = typer.Option(10.0, "--outlier-scale", help="max(X) multiplier (replace) or increment bound (additive)"),
    outlier_mode: OutlierChoice = typer.Option(OutlierChoice.replace, "--outlier-mode", "-m", help="Outlier semantics"),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Random seed"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output .npz (default: <input>_corrupted.npz)"),
):
    """
    Add Gaussian noise and sparse outliers to a matrix.

    Example:
        robust-nmf corrupt clean.npz --noise-std 0.05 --outlier-fraction 0.02 --seed 1
    """
    from robust_nmf import Corruptor, CorruptionConfig

    console.print(Panel.fit("🎲 [bold]Matrix Corruption[/bold]", border_style="blue"))

    X = load_matrix(input_file)
    try:
        config = CorruptionConfig(
            noise_std=noise_std,
            outlier_fraction=outlier_fraction,
            outlier_scale=outlier_scale,
            outlier_mode=outlier_mode.value,
        )
        corrupted = Corruptor(rng=seed).apply(X, config)
    except RobustNMFError as e:
        fail(e)

    changed = int((corrupted != X).sum())
    console.print(f"  [green]✓[/green] {changed} of {X.size} entries changed\n")
    print_matrix_summary(corrupted, title="Corrupted X")

    if output is None:
        output = input_file.with_name(f"{input_file.stem}_corrupted.npz")
    np.savez(output, X=corrupted)
    console.print(f"\n  💾 Saved to: [bold]{output}[/bold]")


@app.command()
def normalize(
    input_file: Path = typer.Argument(..., help="Input .npz containing X"),
    mode: ModeChoice = typer.Option(ModeChoice.none, "--mode", "-m", help="Scaling strategy"),
    clip: bool = typer.Option(True, "--clip/--no-clip", help="Clip negatives to zero before scaling"),
    shift: bool = typer.Option(False, "--shift", help="Shift by the minimum and rescale to [0, 1] instead"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output .npz (default: <input>_normalized.npz)"),
):
    """
    Scale a matrix into a non-negative range.

    Example:
        robust-nmf normalize noisy.npz --mode column_max
        robust-nmf normalize signed.npz --shift
    """
    from robust_nmf import normalize_data, normalized_nonnegative

    console.print(Panel.fit("📏 [bold]Normalization[/bold]", border_style="blue"))

    X = load_matrix(input_file)
    try:
        if shift:
            result = normalized_nonnegative(X, rescale=True)
        else:
            result = normalize_data(X, clip_at_zero=clip, mode=mode.value)
    except RobustNMFError as e:
        fail(e)

    print_matrix_summary(result, title="Normalized X")

    if output is None:
        output = input_file.with_name(f"{input_file.stem}_normalized.npz")
    np.savez(output, X=result)
    console.print(f"\n  💾 Saved to: [bold]{output}[/bold]")


@app.command("load-images")
def load_images(
    folder: Path = typer.Argument(..., help="Folder of same-sized images"),
    pattern: str = typer.Option(".png", "--pattern", "-p", help="Substring file names must contain"),
    normalize_: bool = typer.Option(True, "--normalize/--raw", help="Shift and rescale to [0, 1]"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output .npz (default: <folder>.npz)"),
):
    """
    Stack a folder of grayscale images into the columns of a matrix.

    Example:
        robust-nmf load-images faces/ --pattern .pgm -o faces.npz
    """
    from robust_nmf import load_image_folder

    console.print(Panel.fit("🖼️  [bold]Image Folder Loading[/bold]", border_style="blue"))

    try:
        with console.status("[bold blue]Decoding images..."):
            data = load_image_folder(folder, pattern=pattern, normalize=normalize_)
    except RobustNMFError as e:
        fail(e)

    height, width = data.shape
    console.print(f"  Loaded [cyan]{data.n_images}[/cyan] images of [cyan]{height}×{width}[/cyan] pixels")
    print_matrix_summary(data.X, title="Image Matrix")

    if output is None:
        output = Path(f"{folder.resolve().name}.npz")
    np.savez(output, X=data.X, shape=np.array(data.shape), filenames=np.array(data.filenames))
    console.print(f"\n  💾 Saved to: [bold]{output}[/bold]")


@app.command()
def info(
    input_file: Path = typer.Argument(..., help="Input .npz containing X"),
):
    """
    Display statistics of a saved matrix.

    Example:
        robust-nmf info noisy.npz
    """
    X = load_matrix(input_file)
    console.print(f"  File: [bold]{input_file}[/bold]\n")
    print_matrix_summary(X)


@app.command()
def version():
    """Show version information."""
    from robust_nmf import __version__

    console.print(Panel(
        f"[bold cyan]robust_nmf[/bold cyan] v{__version__}\n\n"
        "Synthetic and image test data for\n"
        "non-negative matrix factorization.",
        border_style="cyan"
    ))


# =============================================================================
# ENTRY POINT
# =============================================================================

def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
