"""Catalog of known Swiss charging point operators."""

from datetime import date, datetime

from .models import ChargingPointOperator


def _start(value: str) -> date:
    """Parse a dd.mm.yyyy catalog date."""
    return datetime.strptime(value, "%d.%m.%Y").date()


KNOWN_OPERATORS: list[ChargingPointOperator] = [
    # Operators publishing real-time status
    ChargingPointOperator("CH*AIL", "AIL", _start("30.11.2022")),
    ChargingPointOperator("CH*CCC", "Move", _start("25.09.2019")),
    ChargingPointOperator("CH*CPI", "Chargepoint", _start("19.06.2023")),
    ChargingPointOperator("CH*ECU", "eCarUp", _start("20.07.2020")),
    ChargingPointOperator("CH*ENMOBILECHARGE", "en mobilecharge", _start("14.06.2021")),
    ChargingPointOperator("CH*EVAEMOBILITAET", "EVA E-Mobilität", _start("14.06.2021")),
    ChargingPointOperator("CH*EWACHARGE", "EWAcharge", _start("14.06.2021")),
    ChargingPointOperator("CH*FASTNED", "Fastned", _start("20.01.2021")),
    ChargingPointOperator("CHEVP", "GreenMotion", _start("25.09.2019")),
    ChargingPointOperator("CH*IBC", "IBC", _start("14.06.2021")),
    ChargingPointOperator("CH*MOBILECHARGE", "mobilecharge", _start("14.06.2021")),
    ChargingPointOperator("CH*MOBIMOEMOBILITY", "Mobimo emobility", _start("14.06.2021")),
    ChargingPointOperator("CH*PACEMOBILITY", "PAC e-moblity", _start("14.06.2021")),
    ChargingPointOperator("CH*PARKCHARGE", "PARK & CHARGE", _start("14.06.2021")),
    ChargingPointOperator("CH*PNR", "PLUG'N ROLL", _start("12.09.2023")),
    ChargingPointOperator("CH*REP", "PLUG'N ROLL", _start("25.09.2019")),
    ChargingPointOperator("CH*SCH", "Saascharge", _start("22.05.2023")),
    ChargingPointOperator("CH*SHE", "Shell Recharge", _start("29.06.2023")),
    ChargingPointOperator("CH*SCHARGE", "S-Charge", _start("14.06.2021")),
    ChargingPointOperator(
        "CH*SWISSCHARGE", "Swisscharge", _start("25.09.2019"), included_networks=["GoFast"]
    ),
    ChargingPointOperator(
        "CH*TAE", "Matterhorn Terminal Täsch", _start("30.11.2022"), included_networks=["ewz"]
    ),
    # Operators without real-time status
    ChargingPointOperator("CH*AVIA", "AVIA", None, with_real_time_data=False),
    ChargingPointOperator("CH*DIE", "Stadt Dietikon", _start("05.05.2020"), with_real_time_data=False),
    ChargingPointOperator("CH*EBS", "ebs Energie AG", _start("16.01.2020"), with_real_time_data=False),
    ChargingPointOperator(
        "CH*EWD", "EWD Elektrizitaetswerk Davos AG", _start("09.09.2020"), with_real_time_data=False
    ),
    ChargingPointOperator(
        "CH*EWO", "Elektrizitätswerk Obwalden", _start("16.12.2019"), with_real_time_data=False
    ),
    ChargingPointOperator(
        "CH*HER", "Elektrizitätswerk Herrliberg", _start("01.05.2020"), with_real_time_data=False
    ),
    ChargingPointOperator("CH*ION", "Ionity", _start("09.09.2020"), with_real_time_data=False),
    ChargingPointOperator("CH*LIDL", "Lidl Schweiz", _start("13.11.2019"), with_real_time_data=False),
    ChargingPointOperator("CH*MIG", "Migrol", _start("15.03.2021"), with_real_time_data=False),
    ChargingPointOperator(
        "CH*TES", "Tesla Supercharger", _start("28.02.2020"), with_real_time_data=False
    ),
]


def find_operator_by_id(operator_id: str) -> ChargingPointOperator | None:
    return next((op for op in KNOWN_OPERATORS if op.operator_id == operator_id), None)


def find_operators_by_name(name: str) -> list[ChargingPointOperator]:
    """Case-insensitive substring match on the operator name."""
    needle = name.lower()
    return [op for op in KNOWN_OPERATORS if needle in op.name.lower()]


def operators_with_real_time_data() -> list[ChargingPointOperator]:
    return [op for op in KNOWN_OPERATORS if op.with_real_time_data]
