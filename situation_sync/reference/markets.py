"""Tracked market instruments and their quotable proxies."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Instrument:
    symbol: str
    name: str
    quote_symbol: str  # symbol actually requested upstream (ETF proxy on the free tier)


@dataclass(frozen=True)
class CryptoAsset:
    coingecko_id: str
    symbol: str
    name: str


CRYPTO_ASSETS: tuple[CryptoAsset, ...] = (
    CryptoAsset("bitcoin", "BTC", "Bitcoin"),
    CryptoAsset("ethereum", "ETH", "Ethereum"),
    CryptoAsset("solana", "SOL", "Solana"),
)

INDICES: tuple[Instrument, ...] = (
    Instrument("^DJI", "Dow Jones", "DIA"),
    Instrument("^GSPC", "S&P 500", "SPY"),
    Instrument("^IXIC", "NASDAQ", "QQQ"),
    Instrument("^RUT", "Russell 2000", "IWM"),
)

SECTORS: tuple[Instrument, ...] = (
    Instrument("XLK", "Tech", "XLK"),
    Instrument("XLF", "Finance", "XLF"),
    Instrument("XLE", "Energy", "XLE"),
    Instrument("XLV", "Health", "XLV"),
    Instrument("XLY", "Consumer", "XLY"),
    Instrument("XLI", "Industrial", "XLI"),
    Instrument("XLP", "Staples", "XLP"),
    Instrument("XLU", "Utilities", "XLU"),
    Instrument("XLB", "Materials", "XLB"),
    Instrument("XLRE", "Real Est", "XLRE"),
    Instrument("XLC", "Comms", "XLC"),
    Instrument("SMH", "Semis", "SMH"),
)

COMMODITIES: tuple[Instrument, ...] = (
    Instrument("^VIX", "VIX", "VIXY"),
    Instrument("GC=F", "Gold", "GLD"),
    Instrument("CL=F", "Crude Oil", "USO"),
    Instrument("NG=F", "Natural Gas", "UNG"),
    Instrument("SI=F", "Silver", "SLV"),
    Instrument("HG=F", "Copper", "CPER"),
)
