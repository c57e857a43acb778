"""CLI Entry Point for descentfit
=============================

Entry point for console script: descentfit DATA [args]
"""

import sys

from descentfit.cli.args_parser import create_parser
from descentfit.cli.commands import dispatch_command
from descentfit.utils.logging import get_logger

logger = get_logger(__name__)


def main(argv=None) -> int:
    """Main CLI entry point.

    Parses command-line arguments and dispatches the fit.

    Returns:
        Exit code: 0 on success, 1 on error, 130 when interrupted
    """
    try:
        parser = create_parser()
        args = parser.parse_args(argv)

        logger.debug(f"Arguments: {vars(args)}")

        result = dispatch_command(args)

        if result and result.get("success", False):
            logger.info("Fit completed successfully")
            return 0

        error_msg = result.get("error", "Unknown error") if result else "Command failed"
        logger.error(f"Fit failed: {error_msg}")
        return 1

    except KeyboardInterrupt:
        logger.info("Fit interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        logger.debug("Full traceback:", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
