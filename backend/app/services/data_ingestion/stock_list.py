"""
Screening Universes

Built-in symbol lists the screener walks when the caller does not supply
its own. Order matters: ties in score keep universe order.
"""

# Broad list for accumulation screening
_ACCUMULATION_GROUPS = [
    # Large Cap Tech
    "AAPL", "MSFT", "GOOGL", "AMZN", "META", "NVDA", "TSLA", "NFLX", "ADBE", "CRM",
    "ORCL", "INTC", "AMD", "QCOM", "AVGO", "TXN", "MU", "AMAT", "LRCX", "KLAC",
    # Growth
    "SHOP", "ROKU", "SQ", "PLTR", "SNOW", "CRWD", "ZS", "DDOG", "NET", "OKTA",
    "TWLO", "DOCU", "TEAM", "WDAY", "VEEV", "NOW",
    # Crypto-Related
    "COIN", "RIOT", "MARA", "MSTR", "BITF", "HUT", "CLSK", "BTBT",
    # ETFs
    "SPY", "QQQ", "IWM", "XLK", "ARKK", "ARKW", "ARKG", "VTI", "VOO", "VEA",
    # Traditional Value
    "BRK-B", "JPM", "BAC", "WMT", "JNJ", "PG", "KO", "DIS", "V", "MA",
    "UNH", "HD", "PFE", "ABBV", "TMO", "ABT", "CVX", "XOM", "LLY", "COST",
    # Financial Services
    "GS", "MS", "C", "WFC", "USB", "PNC", "TFC", "COF", "AXP", "BLK",
    "SCHW", "SPGI", "ICE", "CME", "MCO", "MSCI", "PYPL",
    # Healthcare & Biotech
    "MRNA", "BNTX", "GILD", "REGN", "VRTX", "BIIB", "AMGN", "BMY", "MRK",
    "ISRG", "DXCM", "ILMN", "INCY", "BMRN", "TECH", "EXAS",
    # Consumer & Retail
    "BABA", "JD", "PDD", "MELI", "SE", "BKNG", "ABNB", "UBER", "LYFT",
    "DASH", "ETSY", "EBAY", "PINS", "SNAP", "SPOT",
    # Industrial & Energy
    "CAT", "DE", "BA", "GE", "HON", "UPS", "FDX", "LMT", "RTX", "NOC",
    "F", "GM", "RIVN", "LCID", "NIO", "XPEV", "LI", "PLUG", "FCEL",
    # Communication Services
    "GOOG", "CMCSA", "VZ", "T", "TMUS", "CHTR",
    # Emerging Growth
    "RBLX", "U", "DKNG", "PENN", "SOFI", "AFRM", "HOOD", "AMC", "GME", "BB", "NOK",
    # Real Estate
    "AMT", "PLD", "CCI", "EQIX", "WELL", "DLR", "PSA", "O",
    # Utilities & Commodities
    "NEE", "DUK", "SO", "AEP", "EXC", "XEL", "SRE", "D", "PCG", "EIX",
    "GOLD", "NEM", "FCX", "SCCO", "AA", "CLF", "MT", "VALE", "RIO",
]

# Active, high-beta names for breakout screening
_SCREENER_GROUPS = [
    "AAPL", "MSFT", "GOOGL", "AMZN", "TSLA", "META", "NVDA", "NFLX", "AMD", "INTC",
    "BABA", "CRM", "ORCL", "ADBE", "PYPL", "UBER", "LYFT", "SNAP", "SPOT",
    "ROKU", "SQ", "SHOP", "PINS", "DOCU", "PLTR", "COIN", "RBLX",
    "GME", "AMC", "BB", "NOK", "PLUG", "FCEL", "RIOT", "MARA", "DKNG",
    "PENN", "WYNN", "MGM", "LVS", "NCLH", "CCL", "RCL", "DAL", "UAL", "AAL",
]

ACCUMULATION_UNIVERSE: list[str] = list(dict.fromkeys(_ACCUMULATION_GROUPS))
SCREENER_UNIVERSE: list[str] = list(dict.fromkeys(_SCREENER_GROUPS))

# Broad index ETFs dropped unless the caller opts in
ETF_SYMBOLS = frozenset({"SPY", "QQQ", "IWM", "XLK", "ARKK"})

UNIVERSES = {
    "accumulation": ACCUMULATION_UNIVERSE,
    "screener": SCREENER_UNIVERSE,
}


def get_universe(name: str, include_etfs: bool = False) -> list[str]:
    """
    Get a built-in universe by name.

    Unknown names fall back to the screener list.
    """
    symbols = UNIVERSES.get(name, SCREENER_UNIVERSE)
    if include_etfs:
        return list(symbols)
    return [s for s in symbols if s not in ETF_SYMBOLS]


def universe_for_variant(variant: str, include_etfs: bool = False) -> list[str]:
    """Accumulation scoring walks the broad list; every other variant the screener list."""
    name = "accumulation" if variant == "accumulation" else "screener"
    return get_universe(name, include_etfs)
