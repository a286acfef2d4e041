"""
Example: noise addition with privacy accounting.

Goal:
    Release a single value through the Laplace mechanism, release another
    through the Gaussian mechanism, and report the accountant's total loss.

Usage:
    python examples/noise_addition.py [--seed 0] [--value 100] [--log-level INFO]
"""
import argparse
import sys
from pathlib import Path

project_root = Path(__file__).resolve().parents[1]
src_root = project_root / "src"
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))

from dpnoise import PrivacyAccountant, gaussian_mechanism, laplace_mechanism  # noqa: E402
from dpnoise.core.utils import NumpySampler, configure_logging, get_logger  # noqa: E402


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Laplace / Gaussian noise addition demo")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument("--value", type=float, default=100.0, help="Value to privatise (default: 100)")
    parser.add_argument("--sensitivity", type=float, default=1.0)
    parser.add_argument("--epsilon", type=float, default=0.5)
    parser.add_argument("--delta", type=float, default=1e-5)
    parser.add_argument("--log-level", type=str, default=None)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    logger = get_logger("examples.noise_addition")

    sampler = NumpySampler(args.seed)
    accountant = PrivacyAccountant(0.0, 0.0, name="demo")

    laplace_value = laplace_mechanism(args.value, args.sensitivity, args.epsilon, accountant, sampler=sampler)
    gaussian_value = gaussian_mechanism(args.value, args.sensitivity, args.epsilon, args.delta, sampler=sampler)
    total_epsilon, total_delta = accountant.get_privacy_loss()

    logger.info("laplace release %.6f", laplace_value, extra={"value": args.value})
    logger.info("gaussian release %.6f (not charged to the accountant)", gaussian_value)

    return {
        "original_value": args.value,
        "laplace_value": laplace_value,
        "gaussian_value": gaussian_value,
        "total_epsilon": total_epsilon,
        "total_delta": total_delta,
    }


if __name__ == "__main__":
    result = main()
    print(f"Original Value: {result['original_value']}")
    print(f"Noisy Value (Laplace): {result['laplace_value']}")
    print(f"Noisy Value (Gaussian): {result['gaussian_value']}")
    print(f"Total Epsilon: {result['total_epsilon']}")
    print(f"Total Delta: {result['total_delta']}")
