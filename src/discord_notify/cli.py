from __future__ import annotations
import argparse
import os
import sys

from discord_notify.config.resolver import initialize, resolve
from discord_notify.config.store import ConfigStore
from discord_notify.dispatch.dispatcher import dispatch
from discord_notify.errors import NotifyError
from discord_notify.message.builder import build_message, now_timestamp, read_stdin
from discord_notify.models import CliInput, DispatchMode
from discord_notify.utils.logging_setup import setup_logging

def parse_args(argv=None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        prog="discord-notify",
        description="Post a 'job completed' message to a Discord channel or DM.",
    )
    ap.add_argument("-c", "--channel-id", default=os.environ.get("DISCORD_CHANNEL_ID"),
                    help="Channel id, or user id with --dm. Default: DISCORD_CHANNEL_ID env.")
    ap.add_argument("-t", "--token", default=os.environ.get("DISCORD_BOT_TOKEN"),
                    help="Bot token. Default: DISCORD_BOT_TOKEN env.")
    ap.add_argument("-p", "--prepend-message", default=None, help="Header line quoted above the message.")
    ap.add_argument("-i", "--stdin", dest="read_stdin", action="store_true",
                    help="Append everything read from stdin to the message.")
    ap.add_argument("-d", "--dm", action="store_true", help="Send a direct message to the given user id.")
    ap.add_argument("--init", action="store_true", help="Prompt for and save default token/channel, then exit.")
    ap.add_argument("--config", default=None, help="Path to the stored config file.")
    ap.add_argument("--log-file", default=None, help="Also write logs to this file.")
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap.parse_args(argv)

def to_cli_input(args: argparse.Namespace) -> CliInput:
    return CliInput(
        channel_id=args.channel_id,
        token=args.token,
        prepend_message=args.prepend_message,
        read_stdin=args.read_stdin,
        dm=args.dm,
        init=args.init,
    )

def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        logger = setup_logging(args.log_file, verbose=args.verbose)
    except OSError as e:
        print(f"logging setup failed: {e}", file=sys.stderr)
        return 1
    cli = to_cli_input(args)
    store = ConfigStore(args.config)

    stage = "init" if cli.init else "configuration"
    try:
        if cli.init:
            initialize(input, store)
            logger.info(f"Saved defaults to {store.path}")
            return 0

        # (1) Resolve everything before touching stdin or the network
        resolved = resolve(cli, store.load())

        # (2) Build the message
        stage = "input"
        stdin_text = read_stdin() if cli.read_stdin else None
        content = build_message(now_timestamp(), cli.read_stdin, stdin_text, cli.prepend_message)

        # (3) Send
        stage = "dispatch"
        dispatch(DispatchMode.from_flag(cli.dm), resolved, content)
    except NotifyError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.error(f"{stage} interrupted")
        return 1
    except (OSError, EOFError) as e:
        logger.error(f"{stage} failed: {str(e) or type(e).__name__}")
        return 1
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
