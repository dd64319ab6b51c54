"""
Country restrictions for Self-gated contracts

Two packed layouts live here:
- CountryBitmap: enumeration-indexed bitset, one bit per Country member
- pack_forbidden_countries: the layout the Self hub reads on-chain, where the
  3-letter codes are concatenated as ASCII and split into 31-byte field elements
"""

from enum import Enum
from typing import Iterable, List, Set, Union

PADDING_SENTINEL = "\x00\x00\x00"
CODE_LENGTH = 3
MAX_BYTES_IN_FIELD = 31
REQUIRED_CHUNKS = 4


class Country(str, Enum):
    """ISO 3166-1 alpha-3 country codes"""
    AFGHANISTAN = "AFG"
    ALAND_ISLANDS = "ALA"
    ALBANIA = "ALB"
    ALGERIA = "DZA"
    AMERICAN_SAMOA = "ASM"
    ANDORRA = "AND"
    ANGOLA = "AGO"
    ANGUILLA = "AIA"
    ANTARCTICA = "ATA"
    ANTIGUA_AND_BARBUDA = "ATG"
    ARGENTINA = "ARG"
    ARMENIA = "ARM"
    ARUBA = "ABW"
    AUSTRALIA = "AUS"
    AUSTRIA = "AUT"
    AZERBAIJAN = "AZE"
    BAHAMAS = "BHS"
    BAHRAIN = "BHR"
    BANGLADESH = "BGD"
    BARBADOS = "BRB"
    BELARUS = "BLR"
    BELGIUM = "BEL"
    BELIZE = "BLZ"
    BENIN = "BEN"
    BERMUDA = "BMU"
    BHUTAN = "BTN"
    BOLIVIA = "BOL"
    BONAIRE_SINT_EUSTATIUS_AND_SABA = "BES"
    BOSNIA_AND_HERZEGOVINA = "BIH"
    BOTSWANA = "BWA"
    BOUVET_ISLAND = "BVT"
    BRAZIL = "BRA"
    BRITISH_INDIAN_OCEAN_TERRITORY = "IOT"
    BRUNEI_DARUSSALAM = "BRN"
    BULGARIA = "BGR"
    BURKINA_FASO = "BFA"
    BURUNDI = "BDI"
    CABO_VERDE = "CPV"
    CAMBODIA = "KHM"
    CAMEROON = "CMR"
    CANADA = "CAN"
    CAYMAN_ISLANDS = "CYM"
    CENTRAL_AFRICAN_REPUBLIC = "CAF"
    CHAD = "TCD"
    CHILE = "CHL"
    CHINA = "CHN"
    CHRISTMAS_ISLAND = "CXR"
    COCOS_KEELING_ISLANDS = "CCK"
    COLOMBIA = "COL"
    COMOROS = "COM"
    CONGO = "COG"
    DEMOCRATIC_REPUBLIC_OF_THE_CONGO = "COD"
    COOK_ISLANDS = "COK"
    COSTA_RICA = "CRI"
    COTE_D_IVOIRE = "CIV"
    CROATIA = "HRV"
    CUBA = "CUB"
    CURACAO = "CUW"
    CYPRUS = "CYP"
    CZECHIA = "CZE"
    DENMARK = "DNK"
    DJIBOUTI = "DJI"
    DOMINICA = "DMA"
    DOMINICAN_REPUBLIC = "DOM"
    ECUADOR = "ECU"
    EGYPT = "EGY"
    EL_SALVADOR = "SLV"
    EQUATORIAL_GUINEA = "GNQ"
    ERITREA = "ERI"
    ESTONIA = "EST"
    ESWATINI = "SWZ"
    ETHIOPIA = "ETH"
    FALKLAND_ISLANDS = "FLK"
    FAROE_ISLANDS = "FRO"
    FIJI = "FJI"
    FINLAND = "FIN"
    FRANCE = "FRA"
    FRENCH_GUIANA = "GUF"
    FRENCH_POLYNESIA = "PYF"
    FRENCH_SOUTHERN_TERRITORIES = "ATF"
    GABON = "GAB"
    GAMBIA = "GMB"
    GEORGIA = "GEO"
    GERMANY = "DEU"
    GHANA = "GHA"
    GIBRALTAR = "GIB"
    GREECE = "GRC"
    GREENLAND = "GRL"
    GRENADA = "GRD"
    GUADELOUPE = "GLP"
    GUAM = "GUM"
    GUATEMALA = "GTM"
    GUERNSEY = "GGY"
    GUINEA = "GIN"
    GUINEA_BISSAU = "GNB"
    GUYANA = "GUY"
    HAITI = "HTI"
    HEARD_ISLAND_AND_MCDONALD_ISLANDS = "HMD"
    HOLY_SEE = "VAT"
    HONDURAS = "HND"
    HONG_KONG = "HKG"
    HUNGARY = "HUN"
    ICELAND = "ISL"
    INDIA = "IND"
    INDONESIA = "IDN"
    IRAN = "IRN"
    IRAQ = "IRQ"
    IRELAND = "IRL"
    ISLE_OF_MAN = "IMN"
    ISRAEL = "ISR"
    ITALY = "ITA"
    JAMAICA = "JAM"
    JAPAN = "JPN"
    JERSEY = "JEY"
    JORDAN = "JOR"
    KAZAKHSTAN = "KAZ"
    KENYA = "KEN"
    KIRIBATI = "KIR"
    NORTH_KOREA = "PRK"
    SOUTH_KOREA = "KOR"
    KOSOVO = "XKX"
    KUWAIT = "KWT"
    KYRGYZSTAN = "KGZ"
    LAOS = "LAO"
    LATVIA = "LVA"
    LEBANON = "LBN"
    LESOTHO = "LSO"
    LIBERIA = "LBR"
    LIBYA = "LBY"
    LIECHTENSTEIN = "LIE"
    LITHUANIA = "LTU"
    LUXEMBOURG = "LUX"
    MACAO = "MAC"
    MADAGASCAR = "MDG"
    MALAWI = "MWI"
    MALAYSIA = "MYS"
    MALDIVES = "MDV"
    MALI = "MLI"
    MALTA = "MLT"
    MARSHALL_ISLANDS = "MHL"
    MARTINIQUE = "MTQ"
    MAURITANIA = "MRT"
    MAURITIUS = "MUS"
    MAYOTTE = "MYT"
    MEXICO = "MEX"
    MICRONESIA = "FSM"
    MOLDOVA = "MDA"
    MONACO = "MCO"
    MONGOLIA = "MNG"
    MONTENEGRO = "MNE"
    MONTSERRAT = "MSR"
    MOROCCO = "MAR"
    MOZAMBIQUE = "MOZ"
    MYANMAR = "MMR"
    NAMIBIA = "NAM"
    NAURU = "NRU"
    NEPAL = "NPL"
    NETHERLANDS = "NLD"
    NEW_CALEDONIA = "NCL"
    NEW_ZEALAND = "NZL"
    NICARAGUA = "NIC"
    NIGER = "NER"
    NIGERIA = "NGA"
    NIUE = "NIU"
    NORFOLK_ISLAND = "NFK"
    NORTH_MACEDONIA = "MKD"
    NORTHERN_MARIANA_ISLANDS = "MNP"
    NORWAY = "NOR"
    OMAN = "OMN"
    PAKISTAN = "PAK"
    PALAU = "PLW"
    PALESTINE = "PSE"
    PANAMA = "PAN"
    PAPUA_NEW_GUINEA = "PNG"
    PARAGUAY = "PRY"
    PERU = "PER"
    PHILIPPINES = "PHL"
    PITCAIRN = "PCN"
    POLAND = "POL"
    PORTUGAL = "PRT"
    PUERTO_RICO = "PRI"
    QATAR = "QAT"
    REUNION = "REU"
    ROMANIA = "ROU"
    RUSSIA = "RUS"
    RWANDA = "RWA"
    SAINT_BARTHELEMY = "BLM"
    SAINT_HELENA = "SHN"
    SAINT_KITTS_AND_NEVIS = "KNA"
    SAINT_LUCIA = "LCA"
    SAINT_MARTIN = "MAF"
    SAINT_PIERRE_AND_MIQUELON = "SPM"
    SAINT_VINCENT_AND_THE_GRENADINES = "VCT"
    SAMOA = "WSM"
    SAN_MARINO = "SMR"
    SAO_TOME_AND_PRINCIPE = "STP"
    SAUDI_ARABIA = "SAU"
    SENEGAL = "SEN"
    SERBIA = "SRB"
    SEYCHELLES = "SYC"
    SIERRA_LEONE = "SLE"
    SINGAPORE = "SGP"
    SINT_MAARTEN = "SXM"
    SLOVAKIA = "SVK"
    SLOVENIA = "SVN"
    SOLOMON_ISLANDS = "SLB"
    SOMALIA = "SOM"
    SOUTH_AFRICA = "ZAF"
    SOUTH_GEORGIA_AND_THE_SOUTH_SANDWICH_ISLANDS = "SGS"
    SOUTH_SUDAN = "SSD"
    SPAIN = "ESP"
    SRI_LANKA = "LKA"
    SUDAN = "SDN"
    SURINAME = "SUR"
    SVALBARD_AND_JAN_MAYEN = "SJM"
    SWEDEN = "SWE"
    SWITZERLAND = "CHE"
    SYRIA = "SYR"
    TAIWAN = "TWN"
    TAJIKISTAN = "TJK"
    TANZANIA = "TZA"
    THAILAND = "THA"
    TIMOR_LESTE = "TLS"
    TOGO = "TGO"
    TOKELAU = "TKL"
    TONGA = "TON"
    TRINIDAD_AND_TOBAGO = "TTO"
    TUNISIA = "TUN"
    TURKEY = "TUR"
    TURKMENISTAN = "TKM"
    TURKS_AND_CAICOS_ISLANDS = "TCA"
    TUVALU = "TUV"
    UGANDA = "UGA"
    UKRAINE = "UKR"
    UNITED_ARAB_EMIRATES = "ARE"
    UNITED_KINGDOM = "GBR"
    UNITED_STATES = "USA"
    UNITED_STATES_MINOR_OUTLYING_ISLANDS = "UMI"
    URUGUAY = "URY"
    UZBEKISTAN = "UZB"
    VANUATU = "VUT"
    VENEZUELA = "VEN"
    VIETNAM = "VNM"
    BRITISH_VIRGIN_ISLANDS = "VGB"
    US_VIRGIN_ISLANDS = "VIR"
    WALLIS_AND_FUTUNA = "WLF"
    WESTERN_SAHARA = "ESH"
    YEMEN = "YEM"
    ZAMBIA = "ZMB"
    ZIMBABWE = "ZWE"


# Bit position of each country inside a CountryBitmap
_POSITIONS = {country: index for index, country in enumerate(Country)}


def _to_country(value: Union[Country, str]) -> Country:
    """Accept a Country member or its 3-letter code"""
    if isinstance(value, Country):
        return value
    return Country(value.strip().upper())


class CountryBitmap:
    """Fixed-capacity bitset indexed by Country enumeration order"""

    def __init__(self, words: int = REQUIRED_CHUNKS, word_bits: int = 256):
        if words < 1 or word_bits < 1:
            raise ValueError("Bitmap needs at least one word of at least one bit")
        if len(_POSITIONS) > words * word_bits:
            raise ValueError(
                f"Bitmap capacity {words * word_bits} is smaller than "
                f"the {len(_POSITIONS)} known countries"
            )
        self.words = words
        self.word_bits = word_bits

    def pack(self, countries: Iterable[Union[Country, str]]) -> List[int]:
        """Set one bit per country; unlisted countries stay 0"""
        packed = [0] * self.words
        for value in countries:
            position = _POSITIONS[_to_country(value)]
            packed[position // self.word_bits] |= 1 << (position % self.word_bits)
        return packed

    def unpack(self, packed: List[int]) -> Set[Country]:
        """Inverse of pack()"""
        if len(packed) != self.words:
            raise ValueError(f"Expected {self.words} words, got {len(packed)}")

        limit = 1 << self.word_bits
        for word in packed:
            if word < 0 or word >= limit:
                raise ValueError(f"Word {word} does not fit in {self.word_bits} bits")

        return {
            country for country, position in _POSITIONS.items()
            if packed[position // self.word_bits] >> (position % self.word_bits) & 1
        }


def pack_forbidden_countries(countries: Iterable[Union[Country, str]],
                             chunks: int = REQUIRED_CHUNKS) -> List[int]:
    """
    Pack forbidden countries into the field elements the Self hub expects.

    Codes are written in the order given, 3 ASCII bytes each, 31 bytes per
    element with the first byte in the lowest position. Unused elements are 0.
    """
    ordered = [_to_country(value) for value in countries]
    duplicates = sorted({country.value for country in ordered if ordered.count(country) > 1})
    if duplicates:
        raise ValueError(f"Duplicate forbidden countries: {duplicates}")

    capacity = chunks * MAX_BYTES_IN_FIELD // CODE_LENGTH
    if len(ordered) > capacity:
        raise ValueError(f"Too many forbidden countries: {len(ordered)} (max {capacity})")

    data = "".join(country.value for country in ordered).encode("ascii")

    packed = []
    for start in range(0, chunks * MAX_BYTES_IN_FIELD, MAX_BYTES_IN_FIELD):
        packed.append(int.from_bytes(data[start:start + MAX_BYTES_IN_FIELD], "little"))
    return packed


def unpack_forbidden_countries(packed: List[int]) -> List[str]:
    """
    Split packed field elements back into fixed-width 3-character codes.

    Empty slots come back as the padding sentinel, the same way the
    contracts return them from storage.
    """
    data = b"".join(int(element).to_bytes(MAX_BYTES_IN_FIELD, "little") for element in packed)
    usable = len(data) - len(data) % CODE_LENGTH
    return [
        data[i:i + CODE_LENGTH].decode("latin-1")
        for i in range(0, usable, CODE_LENGTH)
    ]


def format_blocked_countries(countries: Iterable[Union[str, bytes]]) -> List[str]:
    """Drop padding entries and trim the rest for display"""
    formatted = []
    for country in countries:
        if isinstance(country, bytes):
            country = country.decode("latin-1")
        if country == PADDING_SENTINEL:
            continue
        formatted.append(country.strip())
    return formatted
