import argparse
import asyncio
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .chain import Chain
from .config import DisperseConfig
from .contract import load_token_info
from .enums import AppState, CurrencyMode, WalletStatus
from .exceptions import ContractNotVerified, DisperseException, format_error, is_user_rejection
from .generator import generate_addresses_with_random_amounts, generate_addresses_with_uniform_amount
from .ledger import Ledger, format_balance
from .locator import BytecodeCache, ContractLocator
from .models import Recipient, TokenInfo
from .parser import parse_recipients
from .session import Session
from .utils.file import load_lines

console = Console()
logger = logging.getLogger("better_disperse")


def setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def print_recipients(recipients: list[Recipient], decimals: int, symbol: str):
    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("address")
    table.add_column("amount", justify="right")
    for i, recipient in enumerate(recipients, start=1):
        table.add_row(f"{i:03}", recipient.address, format_balance(recipient.value, decimals, symbol))
    console.print(table)


def load_config(args) -> DisperseConfig:
    config = DisperseConfig.from_file(args.config) if args.config else DisperseConfig()
    if getattr(args, "rpc", None):
        config.rpc = args.rpc
    if not config.rpc:
        raise DisperseException("No RPC configured, pass --rpc or set `rpc` in the config file")
    if not config.deployment.runtime:
        raise DisperseException("No disperse runtime bytecode configured (`deployment.runtime`)")
    return config


async def locate_contract(chain: Chain, config: DisperseConfig) -> ContractLocator:
    chain_id = await chain.eth.chain_id
    locator = ContractLocator(
        config.candidates(),
        config.deployment.runtime,
        cache=BytecodeCache(config.bytecode_cache_size),
        logger=logger,
    )
    locator.set_connected(True)
    locator.reset(chain_id)
    await locator.verify(chain.get_bytecode)
    return locator


def cmd_parse(args) -> int:
    text = Path(args.file).read_text()
    recipients = parse_recipients(text, args.decimals, logger=logger)
    print_recipients(recipients, args.decimals, args.symbol)
    total = sum(recipient.value for recipient in recipients)
    console.print(f"total: {format_balance(total, args.decimals, args.symbol)}")
    return 0


def cmd_generate(args) -> int:
    addresses = load_lines(args.file)
    if args.amount is not None:
        text = generate_addresses_with_uniform_amount(addresses, args.amount, args.decimal_places)
    else:
        text = generate_addresses_with_random_amounts(addresses, args.min, args.max, args.decimal_places)
    print(text)
    return 0


async def cmd_verify(args) -> int:
    config = load_config(args)
    chain = Chain(config.rpc, provider_timeout=config.provider_timeout, proxy=config.proxy)
    locator = await locate_contract(chain, config)

    if locator.verified_address is None:
        console.print(f"[red]No disperse contract found on chain {locator.chain_id}[/red]")
        return 1

    verified = locator.verified_address
    console.print(f"[green]{verified.label}[/green] disperse contract on chain {locator.chain_id}: {verified.address}")
    return 0


async def cmd_check(args) -> int:
    config = load_config(args)
    chain = Chain(
        config.rpc,
        native_currency=config.native_currency,
        provider_timeout=config.provider_timeout,
        proxy=config.proxy,
    )
    locator = await locate_contract(chain, config)

    session = Session(logger=logger)
    session.update(
        status=WalletStatus.CONNECTED,
        chain_id=locator.chain_id,
        is_chain_supported=config.is_chain_supported(locator.chain_id),
        is_contract_deployed=locator.is_contract_deployed,
        is_bytecode_loading=locator.is_loading,
        has_contract_address=locator.has_contract_address,
    )

    if session.state == AppState.NETWORK_UNAVAILABLE:
        raise ContractNotVerified(f"Network {locator.chain_id} is unavailable: no disperse contract")

    native_balance = None
    token = TokenInfo()
    if args.token:
        token = await load_token_info(chain, args.token, args.account, locator.contract_address)
        session.select_token(token)
    else:
        native_balance = await chain.get_native_balance(args.account)

    sending = CurrencyMode.TOKEN if args.token else CurrencyMode.ETHER
    decimals = token.decimals if args.token else config.native_currency.decimals
    recipients = parse_recipients(Path(args.file).read_text(), decimals, logger=logger)
    session.enter_recipients(recipients)

    ledger = Ledger.calculate(
        recipients,
        sending,
        token,
        native_balance=native_balance,
        native_symbol=config.native_currency.symbol,
    )
    print_recipients(recipients, ledger.decimals, ledger.symbol)
    console.print(f"total:     {format_balance(ledger.total, ledger.decimals, ledger.symbol)}")
    console.print(f"balance:   {format_balance(ledger.balance, ledger.decimals, ledger.symbol)}")
    console.print(f"remaining: {format_balance(ledger.left, ledger.decimals, ledger.symbol)}")
    if sending == CurrencyMode.TOKEN:
        console.print(f"allowance: {format_balance(ledger.allowance, ledger.decimals, ledger.symbol)}")
    logger.debug("Session state: %s", session.state.name)

    if not ledger.is_eligible:
        console.print(f"[red]{ledger.message}[/red]")
        return 1
    console.print("[green]ready to disperse[/green]")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="better_disperse", description="Batch transfer planning")
    parser.add_argument("-v", "--verbose", action="store_true")
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser("parse", help="Parse a recipients file")
    parse_cmd.add_argument("file")
    parse_cmd.add_argument("--decimals", type=int, default=18)
    parse_cmd.add_argument("--symbol", default="ETH")
    parse_cmd.set_defaults(handler=cmd_parse)

    generate_cmd = subparsers.add_parser("generate", help="Build recipients text from an address list")
    generate_cmd.add_argument("file", help="One address per line")
    generate_cmd.add_argument("--amount", type=float)
    generate_cmd.add_argument("--min", type=float, default=0.1)
    generate_cmd.add_argument("--max", type=float, default=0.3)
    generate_cmd.add_argument("--decimal-places", type=int, default=2)
    generate_cmd.set_defaults(handler=cmd_generate)

    verify_cmd = subparsers.add_parser("verify", help="Find the disperse contract on a chain")
    verify_cmd.add_argument("--config")
    verify_cmd.add_argument("--rpc")
    verify_cmd.set_defaults(handler=cmd_verify)

    check_cmd = subparsers.add_parser("check", help="Check whether an account can disperse a recipients file")
    check_cmd.add_argument("file")
    check_cmd.add_argument("--account", required=True)
    check_cmd.add_argument("--token")
    check_cmd.add_argument("--config")
    check_cmd.add_argument("--rpc")
    check_cmd.set_defaults(handler=cmd_check)

    return parser


def main(argv: list[str] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        result = args.handler(args)
        if asyncio.iscoroutine(result):
            result = asyncio.run(result)
        return result
    except DisperseException as e:
        console.print(f"[red]{e}[/red]")
        return 2
    except KeyboardInterrupt:
        logger.warning("Cancelled by the user")
        return 130
    except Exception as e:
        if is_user_rejection(e):
            logger.info("Request rejected by the user")
            return 130
        logger.error(format_error(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
