import random
from datetime import date

CONTRACT_NUMBER_PREFIX = "CON"


def generate_contract_number(today: date | None = None, rng: random.Random | None = None) -> str:
    """Build a human-readable number like CON-2025-4821.

    Not guaranteed unique; the unique constraint on contracts.contract_number
    is the final arbiter.
    """
    today = today or date.today()
    rng = rng or random
    return f"{CONTRACT_NUMBER_PREFIX}-{today.year}-{rng.randint(1000, 9999)}"
