"""
Example data for the Factor Calculator.

Generates a reproducible set of measurement rows for demonstration:
roll weights between 80 and 120 kg with roughly 2.5 m/kg, plus one
mis-keyed row whose ratio sits far outside ±2σ.
"""

import os
import random
from typing import List, Tuple

EXAMPLE_FACTOR = 2.5
EXAMPLE_SPREAD = 0.04
# Below six rows a single extreme value cannot exceed 2σ of its own group
MIN_EXAMPLE_ROWS = 6


def generate_example_pairs(n_rows: int = 12, seed: int = 42) -> List[Tuple[float, float]]:
    """Return ``(gross_weight, length)`` pairs with one deliberate outlier.

    The last pair uses ten times the nominal factor, so the group always
    has a genuine outlier regardless of *seed*.
    """
    if n_rows < MIN_EXAMPLE_ROWS:
        raise ValueError(
            f"generate_example_pairs requires n_rows >= {MIN_EXAMPLE_ROWS}, got {n_rows}"
        )
    rng = random.Random(seed)
    pairs = []
    for _ in range(n_rows - 1):
        weight = round(rng.uniform(80.0, 120.0), 1)
        factor = EXAMPLE_FACTOR * (1.0 + rng.uniform(-EXAMPLE_SPREAD, EXAMPLE_SPREAD))
        pairs.append((weight, round(weight * factor, 1)))
    weight = round(rng.uniform(80.0, 120.0), 1)
    pairs.append((weight, round(weight * EXAMPLE_FACTOR * 10, 1)))
    return pairs


def generate_example_csv(output_dir: str, n_rows: int = 12, seed: int = 42) -> str:
    """Write the example pairs to ``example_rows.csv`` in *output_dir*.

    Returns the path of the written file.  A header line is included;
    the importer skips it because it is not numeric.
    """
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, "example_rows.csv")
    with open(path, 'w', encoding='utf-8', newline='') as fh:
        fh.write("Peso Bruto;Metros\n")
        for weight, length in generate_example_pairs(n_rows, seed):
            fh.write(f"{weight};{length}\n")
    return path
