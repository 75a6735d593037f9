"""
Enumerations for Bitcoin.de Trading API v4 parameter values.
"""
from enum import Enum


class OrderType(str, Enum):
    """Order side as expected by the API."""

    BUY = "buy"
    SELL = "sell"


class TradeRating(str, Enum):
    """Rating values accepted by addTradeRating and the mark-as-received calls."""

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class Currency(str, Enum):
    """Currencies known to the API (path value is lowercase)."""

    BTC = "BTC"
    BCH = "BCH"
    ETH = "ETH"
    EUR = "EUR"
    LTC = "LTC"
    XRP = "XRP"
    EOS = "EOS"
    BNB = "BNB"
    XMR = "XMR"
    TRX = "TRX"
    ETC = "ETC"
    DASH = "DASH"
    ZEC = "ZEC"
    REP = "REP"
    BAT = "BAT"
    AIDUS = "AIDUS"
    XLM = "XLM"
    AVAX = "AVAX"
    ADA = "ADA"
    GRT = "GRT"
    LINK = "LINK"
    MATIC = "MATIC"
    SOL = "SOL"
    DOT = "DOT"
    UNI = "UNI"
    CHF = "CHF"
    USD = "USD"

    @property
    def api_value(self) -> str:
        return self.value.lower()


class TradingPair(str, Enum):
    """Trading pairs known to the API (path value is lowercase, e.g. ``btceur``)."""

    BTCEUR = "BTCEUR"
    BCHEUR = "BCHEUR"
    ETHBTC = "ETHBTC"
    ETHEUR = "ETHEUR"
    LTCEUR = "LTCEUR"
    LTCBTC = "LTCBTC"
    XRPEUR = "XRPEUR"
    XRPBTC = "XRPBTC"
    EOSEUR = "EOSEUR"
    EOSBTC = "EOSBTC"
    BNBEUR = "BNBEUR"
    BNBBTC = "BNBBTC"
    XMREUR = "XMREUR"
    XMRBTC = "XMRBTC"
    TRXEUR = "TRXEUR"
    TRXBTC = "TRXBTC"
    ETCBTC = "ETCBTC"
    ETCEUR = "ETCEUR"
    DASHEUR = "DASHEUR"
    DASHBTC = "DASHBTC"
    ZECEUR = "ZECEUR"
    ZECBTC = "ZECBTC"
    REPEUR = "REPEUR"
    REPBTC = "REPBTC"
    BATEUR = "BATEUR"
    BATBTC = "BATBTC"
    AIDUSDEUR = "AIDUSDEUR"
    AIDUSDBTC = "AIDUSDBTC"
    XLMEUR = "XLMEUR"
    XLMBTC = "XLMBTC"
    AVAXEUR = "AVAXEUR"
    AVAXBTC = "AVAXBTC"
    ADAEUR = "ADAEUR"
    ADABTC = "ADABTC"
    GRTEUR = "GRTEUR"
    GRTBTC = "GRTBTC"
    LINKEUR = "LINKEUR"
    LINKBTC = "LINKBTC"
    MATICBTC = "MATICBTC"
    MATICEUR = "MATICEUR"
    SOLEUR = "SOLEUR"
    SOLBTC = "SOLBTC"
    DOTEUR = "DOTEUR"
    DOTBTC = "DOTBTC"
    UNIEUR = "UNIEUR"
    UNIBTC = "UNIBTC"
    XMRETH = "XMRETH"
    XRPETH = "XRPETH"
    LTCETH = "LTCETH"
    DASHETH = "DASHETH"
    ZECETH = "ZECETH"
    REPBCH = "REPBCH"
    BATBCH = "BATBCH"
    XLMBCH = "XLMBCH"
    ADAETH = "ADAETH"
    GRTETH = "GRTETH"
    LINKETH = "LINKETH"
    MATICETH = "MATICETH"
    SOLETH = "SOLETH"
    DOTETH = "DOTETH"
    UNIBNB = "UNIBNB"
    EURCHF = "EURCHF"
    BTCCHF = "BTCCHF"
    ETHCHF = "ETHCHF"

    @property
    def api_value(self) -> str:
        return self.value.lower()

    @classmethod
    def from_str(cls, value: str) -> "TradingPair":
        """
        Parse a trading pair case-insensitively.

        Examples:
            >>> TradingPair.from_str("btceur")
            <TradingPair.BTCEUR: 'BTCEUR'>

        Raises:
            ValueError: If the pair is not known
        """
        try:
            return cls(value.strip().upper())
        except ValueError:
            raise ValueError(f"Unknown trading pair: {value}")
