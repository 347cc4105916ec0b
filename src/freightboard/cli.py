"""
Command-line front end for the freight board.

Every command maps to one service call. Failures are caught here, logged,
and reported with a generic message.
"""

import argparse
import sys
from datetime import date
from typing import Any, Optional, TypeVar

import structlog
from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError

from freightboard.core.config import get_config
from freightboard.core.exceptions import DriverHasFreightsError, FreightBoardError
from freightboard.core.logging import configure_logging
from freightboard.data.models.driver import DriverInput, DriverStatus
from freightboard.data.models.freight import Freight, FreightInput, FreightStatus, Product
from freightboard.data.models.pricing import FreightCalculation
from freightboard.services.dashboard import DashboardService
from freightboard.services.driver import DriverService
from freightboard.services.finance import FinanceService
from freightboard.services.freight import FreightService
from freightboard.services.freight_filters import FreightFilters, SortKey, SortState
from freightboard.utils.date_picker import MonthView, WEEKDAYS_PT, format_long_date, format_short_date
from freightboard.utils.formatting import format_brl, format_number, format_tons

logger = structlog.get_logger("freightboard.cli")

ModelT = TypeVar("ModelT", bound=BaseModel)


def _enum_arg(enum_cls):
    """argparse type accepting either the member name or the stored value."""

    def parse(text: str):
        key = text.strip().upper().replace("-", "_")
        if key in enum_cls.__members__:
            return enum_cls[key]
        for member in enum_cls:
            if member.value.upper() == text.strip().upper():
                return member
        choices = ", ".join(m.name.lower() for m in enum_cls)
        raise argparse.ArgumentTypeError(f"invalid choice '{text}' (choose from {choices})")

    return parse


def _date_arg(text: str) -> date:
    try:
        return date.fromisoformat(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid date '{text}', expected YYYY-MM-DD") from e


def _print_freight_row(f: Freight) -> None:
    status = f.status.label if f.status else "REGISTRADO"
    print(
        f"{f.id:<36}  {format_short_date(f.date)}  {f.product:<6}  "
        f"{(f.license_plate or '-'):<8}  {(f.driver_name or 'Sem Motorista'):<20}  "
        f"{f.destination:<18}  {format_tons(f.weight_loaded):>10}  "
        f"{format_brl(f.computed_total):>16}  {status}"
    )


# ---- Dashboard / finance ----


def cmd_dashboard(args: argparse.Namespace) -> int:
    summary = DashboardService().execute()
    print(get_config().get_company_info().name)
    print(f"Viagens totais:     {summary.total_trips}")
    print(f"Faturamento bruto:  {format_brl(summary.gross_revenue)}")
    print(f"Motoristas:         {summary.drivers_count}")
    print(f"Pendências:         {summary.pending_count}")
    print("\nViagens recentes:")
    if not summary.recent_freights:
        print("  Nenhuma viagem registrada.")
    for f in summary.recent_freights:
        _print_freight_row(f)
    return 0


def cmd_finance(args: argparse.Namespace) -> int:
    summary = FinanceService().execute(today=args.today)
    print(f"Comissão total ({format_brl(summary.commission_per_ton)} / t): {format_brl(summary.total_commission)}")
    print(f"Cargas realizadas: {summary.total_trips}")
    print(f"Melhor dia: {summary.best_day.day} ({format_brl(summary.best_day.value)})")
    print(f"Média diária: {format_brl(summary.daily_average)}")

    r = summary.receivables
    print(f"\nAdiantamentos: recebido {format_brl(r.advance_received)}, a receber {format_brl(r.advance_pending)}")
    print(f"Saldos:        recebido {format_brl(r.balance_received)}, a receber {format_brl(r.balance_pending)}")

    print("\nDetalhamento diário (mês atual):")
    active = summary.active_days
    if not active:
        print("  Nenhuma atividade registrada neste mês.")
    for stat in active:
        print(f"  Dia {stat.day:>2}  {stat.count} viagens  {format_brl(stat.value)}")
    return 0


# ---- Drivers ----


def cmd_drivers_list(args: argparse.Namespace) -> int:
    drivers = DriverService().execute(search=args.search or "")
    if not drivers:
        print("Nenhum motorista encontrado.")
    for d in drivers:
        status = d.status.value if d.status else "Indefinido"
        print(
            f"{d.id:<36}  {d.name:<24}  {(d.license_plate or '-'):<8}  {(d.phone or '-'):<16}  "
            f"{status:<13}  {d.trips:>3} viagens  {d.rating:.1f}★"
        )
    return 0


# Form field -> argparse dest
DRIVER_ARGS = {"name": "name", "phone": "phone", "license_plate": "plate", "status": "status"}
FREIGHT_ARGS = {
    "date": "date",
    "discharge_date": "discharge_date",
    "product": "product",
    "origin": "origin",
    "destination": "destination",
    "invoice_number": "invoice",
    "driver_id": "driver",
    "weight_loaded": "weight",
    "unit_price": "price",
    "status": "status",
}


def _passed(args: argparse.Namespace, fields: dict[str, str]) -> dict[str, Any]:
    """Form values for the options given on the command line; an empty string clears a field."""
    return {field: getattr(args, dest) for field, dest in fields.items() if getattr(args, dest) is not None}


def _apply_changes(current: ModelT, changes: dict[str, Any]) -> ModelT:
    """Overlay changes on the stored form values and validate the result."""
    return type(current).model_validate({**current.model_dump(), **changes})


def _driver_input(args: argparse.Namespace) -> DriverInput:
    return DriverInput(**_passed(args, DRIVER_ARGS))


def cmd_drivers_add(args: argparse.Namespace) -> int:
    driver = DriverService().create(_driver_input(args))
    print(f"Motorista cadastrado: {driver} [{driver.id}]")
    return 0


def cmd_drivers_edit(args: argparse.Namespace) -> int:
    service = DriverService()
    data = _apply_changes(service.get(args.id).to_input(), _passed(args, DRIVER_ARGS))
    driver = service.update(args.id, data)
    print(f"Motorista atualizado: {driver}")
    return 0


def cmd_drivers_delete(args: argparse.Namespace) -> int:
    DriverService().delete(args.id)
    print("Motorista excluído.")
    return 0


def cmd_drivers_rate(args: argparse.Namespace) -> int:
    driver = DriverService().set_rating(args.id, args.rating)
    print(f"Avaliação de {driver.name}: {driver.rating:.1f}")
    return 0


# ---- Freights ----


def cmd_freights_list(args: argparse.Namespace) -> int:
    filters = FreightFilters(
        search=args.search or "",
        start_date=args.start,
        end_date=args.end,
        statuses=args.status or [],
        product=args.product,
        driver_id=args.driver,
    )
    sort = SortState(key=args.sort, descending=not args.asc) if args.sort else SortState()

    service = FreightService()
    view = service.execute(filters=filters, sort=sort)

    if args.export:
        with open(args.export, "w", encoding="utf-8", newline="") as out:
            count = service.export_csv(view.freights, out)
        print(f"{count} fretes exportados para {args.export}")
        return 0

    if not view.freights:
        print("Nenhum frete encontrado.")
    for f in view.freights:
        _print_freight_row(f)
    print(
        f"\n{view.shown_count} de {view.total_count} fretes  "
        f"{format_tons(view.total_weight)}  {format_brl(view.total_value)}"
    )
    return 0


def _freight_input(args: argparse.Namespace) -> FreightInput:
    return FreightInput(**_passed(args, FREIGHT_ARGS))


def _print_calculation(weight, price) -> None:
    pricing = get_config().get_pricing()
    calc = FreightCalculation.compute(weight, price, pricing)
    print(f"  Sacas ({pricing.sack_weight_kg}kg):  {format_number(calc.sacks_amount)}")
    print(f"  Valor total:   {format_brl(calc.total_value)}")
    print(f"  Adiantamento:  {format_brl(calc.advance_value)}")
    print(f"  Saldo:         {format_brl(calc.balance_value)}")


def cmd_freights_add(args: argparse.Namespace) -> int:
    data = _freight_input(args)
    freight = FreightService().create(data)
    print(f"Frete registrado [{freight.id}]")
    _print_calculation(data.weight_loaded, data.unit_price)
    return 0


def cmd_freights_edit(args: argparse.Namespace) -> int:
    service = FreightService()
    data = _apply_changes(service.get(args.id).to_input(), _passed(args, FREIGHT_ARGS))
    freight = service.update(args.id, data)
    print(f"Frete atualizado: {freight}")
    _print_calculation(data.weight_loaded, data.unit_price)
    return 0


def cmd_freights_status(args: argparse.Namespace) -> int:
    freight = FreightService().change_status(args.id, args.status)
    print(f"Status do frete {freight.id}: {args.status.label}")
    return 0


def cmd_freights_pay(args: argparse.Namespace) -> int:
    freight = FreightService().set_payment(args.id, advance_paid=args.advance, balance_paid=args.balance)
    print(
        f"Adiantamento: {'pago' if freight.advance_paid else 'pendente'}  "
        f"Saldo: {'pago' if freight.balance_paid else 'pendente'}"
    )
    return 0


def cmd_freights_delete(args: argparse.Namespace) -> int:
    FreightService().delete(args.id)
    print("Frete excluído.")
    return 0


def cmd_calculate(args: argparse.Namespace) -> int:
    _print_calculation(args.weight, args.price)
    return 0


def cmd_calendar(args: argparse.Namespace) -> int:
    view = MonthView.for_value(args.date)
    if view.selected:
        print(format_long_date(view.selected))
    print(view.title.center(28))
    print(" ".join(f"{d:>3}" for d in WEEKDAYS_PT))
    for week in view.weeks():
        cells = []
        for cell in week:
            text = f"{cell.day.day:>2}" if cell.in_month else " ."
            marker = "*" if cell.selected else ("!" if cell.today else " ")
            cells.append(f"{text}{marker}")
        print(" ".join(cells))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="freightboard", description="Freight and driver management")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("dashboard", help="Overview counters and recent trips")
    p.set_defaults(func=cmd_dashboard)

    p = sub.add_parser("finance", help="Commission and receivables summary")
    p.add_argument("--today", type=_date_arg, default=None, help="Reference day (YYYY-MM-DD)")
    p.set_defaults(func=cmd_finance)

    p = sub.add_parser("calculate", help="Preview sacks, total and payment split")
    p.add_argument("weight", help="Loaded weight in tons")
    p.add_argument("price", help="Price per ton")
    p.set_defaults(func=cmd_calculate)

    p = sub.add_parser("calendar", help="Show a month grid")
    p.add_argument("--date", type=_date_arg, default=None)
    p.set_defaults(func=cmd_calendar)

    # drivers
    drivers = sub.add_parser("drivers", help="Manage drivers").add_subparsers(dest="action", required=True)

    p = drivers.add_parser("list")
    p.add_argument("--search", default="")
    p.set_defaults(func=cmd_drivers_list)

    for name, func in (("add", cmd_drivers_add), ("edit", cmd_drivers_edit)):
        p = drivers.add_parser(name)
        if name == "edit":
            p.add_argument("id")
        p.add_argument("--name", required=name == "add")
        p.add_argument("--phone")
        p.add_argument("--plate")
        p.add_argument("--status", type=_enum_arg(DriverStatus))
        p.set_defaults(func=func)

    p = drivers.add_parser("delete")
    p.add_argument("id")
    p.set_defaults(func=cmd_drivers_delete)

    p = drivers.add_parser("rate")
    p.add_argument("id")
    p.add_argument("rating", type=float)
    p.set_defaults(func=cmd_drivers_rate)

    # freights
    freights = sub.add_parser("freights", help="Manage freights").add_subparsers(dest="action", required=True)

    p = freights.add_parser("list")
    p.add_argument("--search", default="")
    p.add_argument("--from", dest="start", type=_date_arg)
    p.add_argument("--to", dest="end", type=_date_arg)
    p.add_argument("--status", action="append", type=_enum_arg(FreightStatus))
    p.add_argument("--product", type=_enum_arg(Product))
    p.add_argument("--driver")
    p.add_argument("--sort", type=_enum_arg(SortKey), help="date, product, driver, destination, weight, total, status, ...")
    p.add_argument("--asc", action="store_true", help="Ascending order (default descending)")
    p.add_argument("--export", metavar="PATH", help="Write the listed freights to CSV")
    p.set_defaults(func=cmd_freights_list)

    for name, func in (("add", cmd_freights_add), ("edit", cmd_freights_edit)):
        p = freights.add_parser(name)
        if name == "edit":
            p.add_argument("id")
        required = name == "add"
        p.add_argument("--date", type=_date_arg, required=required)
        p.add_argument("--discharge-date", type=_date_arg)
        p.add_argument("--product", type=_enum_arg(Product), required=required)
        p.add_argument("--origin")
        p.add_argument("--destination", required=required)
        p.add_argument("--invoice")
        p.add_argument("--driver")
        p.add_argument("--weight", required=required, help="Tons loaded")
        p.add_argument("--price", required=required, help="Price per ton")
        p.add_argument("--status", type=_enum_arg(FreightStatus))
        p.set_defaults(func=func)

    p = freights.add_parser("status")
    p.add_argument("id")
    p.add_argument("status", type=_enum_arg(FreightStatus))
    p.set_defaults(func=cmd_freights_status)

    p = freights.add_parser("pay")
    p.add_argument("id")
    p.add_argument("--advance", action=argparse.BooleanOptionalAction, default=None)
    p.add_argument("--balance", action=argparse.BooleanOptionalAction, default=None)
    p.set_defaults(func=cmd_freights_pay)

    p = freights.add_parser("delete")
    p.add_argument("id")
    p.set_defaults(func=cmd_freights_delete)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Run the CLI and return the exit code."""
    load_dotenv()
    args = build_parser().parse_args(argv)

    env = get_config().env
    configure_logging(args.log_level or env.log_level, env.log_format)

    try:
        return args.func(args)
    except DriverHasFreightsError as e:
        logger.warning("command_refused", command=args.command, error=e.message)
        print(f"Erro: {e.message}", file=sys.stderr)
        return 1
    except (FreightBoardError, ValidationError, ValueError) as e:
        logger.error("command_failed", command=args.command, error=str(e))
        print("Erro ao executar a operação. Verifique os dados e tente novamente.", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
