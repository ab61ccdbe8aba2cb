import argparse
import random


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a Light Weaver level and log it.")
    parser.add_argument("--difficulty", default="medium", choices=["easy", "medium", "hard"])
    parser.add_argument("--seed", type=int, default=None, help="RNG seed (random if omitted)")
    parser.add_argument("--guarantee-path", action="store_true",
                        help="Skip randomized generation and build the corridor level directly")
    parser.add_argument("--log-dir", default=None,
                        help="Directory for log_dump/ (defaults to the project root)")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    from lightweaver.config import get_project_root, setup_logging
    from lightweaver.game.data.level import Difficulty, LevelConfig, LevelGenerator

    args = parse_args(argv)

    # Initialize logging first
    log_root = args.log_dir or get_project_root()
    logger = setup_logging(log_root)

    logger.info("=" * 60)
    logger.info("Level generation started")

    try:
        difficulty = Difficulty.from_name(args.difficulty)
        config = LevelConfig(seed=args.seed)
        rng = random.Random(args.seed)

        generator = LevelGenerator(config, rng)
        result = generator.generate(difficulty, guarantee_path=args.guarantee_path)

        for key, value in generator.get_statistics().items():
            logger.info(f"  {key}: {value}")
        logger.info("Level layout:\n" + result.to_ascii(config.start))

    except Exception as e:
        logger.critical(f"Critical error in main: {e}", exc_info=True)
        raise
    finally:
        logger.info("Level generation terminated")
        logger.info("=" * 60)

    return 0


# ------------------------ # ENTRY POINT # ------------------------

if __name__ == "__main__":
    raise SystemExit(main())
