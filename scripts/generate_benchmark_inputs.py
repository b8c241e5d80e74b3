#!/usr/bin/env python3
"""
Generate benchmark input files of different sizes.

Lines are drawn from a fixed vocabulary with a seeded random generator, so
the same target size always produces the same file.
"""

import sys
import random
from pathlib import Path

# Configuration
INPUT_DIR = Path("benchmark_inputs")
SEED = 598

VOCABULARY = [
    "the", "quick", "brown", "fox", "jumps", "over", "lazy", "dog",
    "map", "reduce", "shuffle", "section", "bucket", "worker", "thread",
    "line", "key", "value", "barrier", "output",
]

# Target sizes (approximate)
TARGETS = [
    ("lines_small.txt", 64 * 1024),           # ~64KB
    ("lines_medium.txt", 1024 * 1024),        # ~1MB
    ("lines_large.txt", 10 * 1024 * 1024),    # ~10MB
]


def generate_file(output_path: Path, target_size: int, seed: int = SEED,
                  words_per_line: int = 8) -> int:
    """
    Generate a newline-delimited file of roughly target_size bytes.

    Args:
        output_path: Path where the output file should be written
        target_size: Target file size in bytes
        seed: Random seed
        words_per_line: Maximum number of words on a line

    Returns:
        Actual size of the written file
    """
    print(f"Generating {output_path.name} (target: {target_size / (1024*1024):.2f} MB)...")
    rng = random.Random(seed)

    written = 0
    with open(output_path, 'w', encoding='utf-8', newline='\n') as f:
        while written < target_size:
            count = rng.randint(1, words_per_line)
            line = " ".join(rng.choice(VOCABULARY) for _ in range(count)) + "\n"
            f.write(line)
            written += len(line.encode('utf-8'))

    actual_size = output_path.stat().st_size
    print(f"  ✓ Created: {output_path.name} ({actual_size / (1024*1024):.2f} MB)")
    return actual_size


def main():
    """Generate all benchmark input files."""
    print("=" * 70)
    print("Generating Benchmark Input Files")
    print("=" * 70)

    INPUT_DIR.mkdir(parents=True, exist_ok=True)

    total_size = 0
    for filename, target_size in TARGETS:
        output_path = INPUT_DIR / filename

        # Skip if file already exists and is approximately the right size
        if output_path.exists():
            existing_size = output_path.stat().st_size
            if abs(existing_size - target_size) < target_size * 0.1:  # Within 10%
                print(f"  ⏭️  Skipping {filename} (already exists, size: {existing_size / (1024*1024):.2f} MB)")
                total_size += existing_size
                continue

        try:
            total_size += generate_file(output_path, target_size)
        except OSError as e:
            print(f"  ❌ Error generating {filename}: {e}")
            return 1

    print("\n" + "=" * 70)
    print("✓ Generation complete!")
    print(f"  Total size: {total_size / (1024*1024):.2f} MB")
    print(f"  Files created in: {INPUT_DIR}")
    print("=" * 70)
    return 0


if __name__ == "__main__":
    sys.exit(main())
