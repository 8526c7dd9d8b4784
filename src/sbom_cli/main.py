import sys
import time
import logging

from .cli import parse_cmdline_args
from .utils import format_duration
from .exceptions import (
    SbomCLIError,
    ApiError,
    NetworkError,
    ConfigurationError,
    AuthenticationError,
    FileSystemError,
    ValidationError,
)
from .handlers import (
    handle_merge,
    handle_enrich,
    handle_inspect,
)

COMMAND_HANDLERS = {
    "merge": handle_merge,
    "enrich": handle_enrich,
    "inspect": handle_inspect,
}


def main() -> int:
    """
    Main function to parse arguments, set up logging and dispatch to the
    appropriate command handler.
    Returns an exit code (0 for success, non-zero for failure).
    """
    start_time = time.monotonic()
    exit_code = 1 # Default to failure
    logger = None

    try:
        params = parse_cmdline_args()

        log_level = getattr(logging, params.log.upper(), logging.INFO)
        # File handler (overwrite mode) plus a console handler at the same level
        logging.basicConfig(level=log_level,
                            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                            handlers=[logging.FileHandler("sbom-cli-log.txt", mode='w')],
                            force=True)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
        console_handler.setLevel(log_level)
        logging.getLogger().addHandler(console_handler)

        logger = logging.getLogger("sbom-cli")

        print("--- SBOM CLI Configuration ---")
        print(f"Command: {params.command}")
        for k, v in sorted(params.__dict__.items()):
            if k == 'command': continue
            display_val = v
            if k == 'github_token' and params.log.upper() != 'DEBUG':
                display_val = "****" if v else "Not Set"
            print(f"  {k:<30} = {display_val}")
        print("------------------------------------")

        handler = COMMAND_HANDLERS.get(params.command)
        if handler:
            handler(params) # Handlers raise exceptions on failure
            exit_code = 0
            print("\nSBOM CLI finished successfully.")
        else:
            print(f"Error: Unknown command '{params.command}'.")
            logger.error(f"Unknown command '{params.command}' encountered in main dispatch.")
            exit_code = 1

    except (AuthenticationError, ConfigurationError, ValidationError) as e:
        # Errors due to user input/setup, no traceback in the log
        print(f"\nDetailed Error Information:")
        print(f"Runtime Error: {e.message}")
        if logger: logger.error("%s: %s", type(e).__name__, e.message, exc_info=False)
        return 1
    except (ApiError, NetworkError, FileSystemError) as e:
        print(f"\nDetailed Error Information:")
        print(f"Runtime Error: {e.message}")
        if logger: logger.error("%s: %s", type(e).__name__, e.message, exc_info=True)
        return 1
    except SbomCLIError as e:
        print(f"\nDetailed Error Information:")
        print(f"SBOM CLI Error: {e.message}")
        if logger: logger.error("Unhandled SbomCLIError: %s", e.message, exc_info=True)
        return 1
    except Exception as e:
        print(f"\nDetailed Error Information:")
        print(f"Unexpected Error: {e}")
        if logger: logger.critical("Unexpected error occurred", exc_info=True)
        return 1
    finally:
        duration_str = format_duration(time.monotonic() - start_time)
        print(f"\nTotal Execution Time: {duration_str}")
        if logger: logger.info("Total execution time: %s", duration_str)

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
