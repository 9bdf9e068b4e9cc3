import argparse
from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from heatstencil.output.bov import read_bov


def visualize_grid(grid, header, output_path, interior_only=False):
    """Renders one grid read from a .bov descriptor as a heat map."""
    if interior_only:
        grid = grid[1:-1, 1:-1]

    fig, ax = plt.subplots(figsize=(6, max(3, 6 * grid.shape[0] / grid.shape[1])))
    # Row 0 is the north boundary, so keep it at the top.
    image = ax.imshow(grid, cmap="inferno", origin="upper", vmin=0.0, vmax=1.0, aspect="auto")
    ax.set_title(f"{header.get('VARIABLE', 'value')} ({grid.shape[1]} x {grid.shape[0]})")
    ax.set_xlabel('x')
    ax.set_ylabel('y')

    cbar = fig.colorbar(image, ax=ax, orientation='vertical', fraction=0.05, pad=0.04)
    cbar.set_label(header.get('VARIABLE', 'value'))

    plt.savefig(output_path)
    plt.close(fig)
    print(f"Saved visualization to {output_path}")


def main():
    parser = argparse.ArgumentParser(description="Plot heatstencil .bov output as heat maps.")
    parser.add_argument("bov_files", nargs='+', help="Descriptor files written by heatstencil -o")
    parser.add_argument("--output_dir", default="heat_visualizations", help="Directory for the PNG files")
    parser.add_argument("--interior_only", action="store_true", help="Drop the halo ring before plotting")
    args = parser.parse_args()

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    for bov_file in args.bov_files:
        bov_path = Path(bov_file)
        if not bov_path.exists():
            print(f"File not found: {bov_path}")
            continue

        print(f"Processing {bov_path.name}...")
        grid, header = read_bov(bov_path)
        if grid.ndim != 2:
            print(f"Skipping {bov_path.name}: only 2D bricks are plotted")
            continue
        visualize_grid(grid, header, output_dir / f"{bov_path.stem}_heat.png", args.interior_only)


if __name__ == "__main__":
    main()
