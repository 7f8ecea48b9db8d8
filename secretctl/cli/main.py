"""CLI entrypoint for secretctl."""
import sys
import math
import signal
import argparse
import logging
import threading
from pathlib import Path

from .validators import parse_labels

VERSION = "0.1.0"

# Configure logging to stderr
logging.basicConfig(
    level=logging.WARNING,
    format="%(message)s",
    stream=sys.stderr
)
logger = logging.getLogger(__name__)


def _context(args):
    """Call context from the global flags."""
    from secretctl.secrets.domains.models import CallContext

    return CallContext(
        project_id=getattr(args, "project_id", None),
        timeout=getattr(args, "timeout", None),
    )


def cmd_create(args):
    """Create a secret and print its identifier."""
    from secretctl.secrets.domains.models import CreateSecretOptions, new_secret
    from secretctl.secrets.workflows.secret_operations import new_client

    opts = CreateSecretOptions(
        label=args.label or [],
        username=args.username,
        password=args.password,
        description=args.description,
    )
    labels = parse_labels(opts.label)

    client = new_client(_context(args))
    secret = new_secret(args.name, opts.username, opts.password, opts.description, labels)
    secret_id = client.secrets_service().create_secret(client.ctx, secret)
    print(secret_id)


def cmd_inspect(args):
    """Print secret details as JSON."""
    from secretctl.secrets.workflows.secret_operations import new_client

    client = new_client(_context(args))
    secret = client.secrets_service().inspect_secret(client.ctx, args.id)
    print(secret.to_json())


def cmd_list(args):
    """Print all secrets of the project as a table."""
    from secretctl.secrets.workflows.secret_operations import new_client
    from .formatters import print_list

    client = new_client(_context(args))
    secrets = client.secrets_service().list_secrets(client.ctx)
    print_list(secrets)


def cmd_delete(args):
    """Delete a secret. Prints nothing on success."""
    from secretctl.secrets.domains.models import DeleteSecretOptions
    from secretctl.secrets.workflows.secret_operations import new_client

    opts = DeleteSecretOptions(recover=args.recover)
    client = new_client(_context(args))
    client.secrets_service().delete_secret(client.ctx, args.name, opts.recover)


def cmd_version(args):
    """Show version information."""
    print(f"secretctl {VERSION}")


def cmd_config_set_path(args):
    """Set config file path preference."""
    from secretctl.secrets.domains.preferences import set_preference

    config_path = Path(args.path).expanduser().resolve()

    if not config_path.is_file():
        print(f"Error: Config file does not exist: {config_path}", file=sys.stderr)
        sys.exit(1)

    set_preference("config_path", str(config_path))
    print(f"Config path set to: {config_path}")


def cmd_config_show(args):
    """Show which config file would be used and why."""
    from secretctl.secrets.domains.config_loader import default_config_path
    from secretctl.secrets.domains.preferences import get_preference

    config_path_pref = get_preference("config_path")
    if config_path_pref:
        config_path, source = Path(config_path_pref), "preference"
    else:
        config_path, source = default_config_path(), "default"

    print(f"Config path: {config_path}")
    if config_path.exists():
        print(f"Source: {source}")
    else:
        print(f"Source: {source} (file not found)")


def cmd_config_clear(args):
    """Clear config path preference."""
    from secretctl.secrets.domains.config_loader import default_config_path
    from secretctl.secrets.domains.preferences import clear_preference

    clear_preference("config_path")
    print(f"Config path preference cleared. Will use default: {default_config_path()}")


COMMANDS = {
    "create": cmd_create,
    "inspect": cmd_inspect,
    "list": cmd_list,
    "ls": cmd_list,
    "delete": cmd_delete,
    "rm": cmd_delete,
    "remove": cmd_delete,
    "version": cmd_version,
}

CONFIG_COMMANDS = {
    "set-path": cmd_config_set_path,
    "show": cmd_config_show,
    "clear": cmd_config_clear,
}


def _positive_float(value):
    try:
        seconds = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid timeout: {value!r}")
    if not math.isfinite(seconds) or seconds <= 0:
        raise argparse.ArgumentTypeError(f"timeout must be a positive finite number, got {value}")
    return seconds


def build_parser():
    parser = argparse.ArgumentParser(
        prog="secret",
        description="Manage secrets stored in GCP Secret Manager",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit codes:
  0 - Success
  1 - Runtime error (authentication, network, secret not found, etc.)
  2 - Usage error (missing arguments, malformed flags)

Environment variables:
  GCP_PROJECT - GCP project ID (overrides config file)

Configuration:
  Default location: ~/.config/secretctl/config.yml
  Custom path: Set with 'secret config set-path <path>'
        """
    )
    parser.add_argument(
        "--project-id",
        help="GCP project ID (defaults to GCP_PROJECT env var, then the config file)"
    )
    parser.add_argument(
        "--timeout",
        type=_positive_float,
        help="Timeout in seconds for each call to Secret Manager"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (repeat for debug output)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    create_parser = subparsers.add_parser(
        "create",
        help="Creates a secret.",
        description="Create a secret and print its identifier."
    )
    create_parser.add_argument("name", metavar="NAME", help="Secret name")
    create_parser.add_argument("-u", "--username", default="", help="username")
    create_parser.add_argument("-p", "--password", default="", help="password")
    create_parser.add_argument("-d", "--description", default="", help="Secret description")
    create_parser.add_argument(
        "-l", "--label",
        action="append",
        metavar="KEY=VALUE",
        help="Label to attach to the secret (repeatable)"
    )

    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Displays secret details",
        description="Print secret details as JSON. Credentials are never shown."
    )
    inspect_parser.add_argument("id", metavar="ID", help="Secret name or full resource name")

    subparsers.add_parser(
        "list",
        aliases=["ls"],
        help="List secrets stored for the existing account.",
        description="List secrets of the project in the order returned by Secret Manager."
    )

    delete_parser = subparsers.add_parser(
        "delete",
        aliases=["rm", "remove"],
        help="Removes a secret.",
        description="""
Remove a secret.

Without --recover the secret and all of its versions are deleted permanently.
With --recover every enabled version is disabled instead, so the secret can be
restored by re-enabling its versions.
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    delete_parser.add_argument("name", metavar="NAME", help="Secret name or full resource name")
    delete_parser.add_argument("--recover", action="store_true", help="Enable recovery.")

    subparsers.add_parser(
        "version",
        help="Show version information",
        description="Display the current version of secretctl"
    )

    config_parser = subparsers.add_parser(
        "config",
        help="Configuration management",
        description="Manage secretctl configuration"
    )
    config_subparsers = config_parser.add_subparsers(dest="config_command")
    config_set_path_parser = config_subparsers.add_parser(
        "set-path",
        help="Set config file path",
        description="Store the absolute path of the config file in ~/.config/secretctl/preferences.json"
    )
    config_set_path_parser.add_argument("path", help="Path to config file")
    config_subparsers.add_parser(
        "show",
        help="Show current config path",
        description="Display the config file path and whether it comes from a preference or the default"
    )
    config_subparsers.add_parser(
        "clear",
        help="Clear config path preference",
        description="Remove the config path preference and fall back to ~/.config/secretctl/config.yml"
    )

    return parser, config_parser


def _raise_interrupt(signum, frame):
    raise KeyboardInterrupt


def main(argv=None):
    """Main CLI entrypoint.

    Exit codes:
        0 - Success
        1 - Runtime errors (authentication, network, secret not found, etc.)
        2 - Usage errors (missing arguments, malformed flags)
    """
    parser, config_parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG if args.verbose > 1 else logging.INFO)

    if not args.command:
        parser.print_help()
        sys.exit(2)

    if args.command == "config":
        handler = CONFIG_COMMANDS.get(args.config_command)
        if handler is None:
            config_parser.print_help()
            sys.exit(2)
    else:
        handler = COMMANDS[args.command]

    # SIGTERM aborts an in-flight call the same way Ctrl-C does.
    # Handlers can only be installed from the main thread.
    installed = threading.current_thread() is threading.main_thread()
    if installed:
        previous_handler = signal.signal(signal.SIGTERM, _raise_interrupt)
    try:
        handler(args)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        if installed:
            signal.signal(signal.SIGTERM, previous_handler or signal.SIG_DFL)


if __name__ == "__main__":
    main()
