"""Static word lists used for symbol filtering and keyword sentiment.

These are defaults only. ``ScoringConfig`` copies them into immutable sets at
construction so every scorer/extractor instance owns its own lists.
"""

DEFAULT_SUBREDDITS = (
    "pennystocks",
    "wallstreetbets",
    "10xPennyStocks",
    "SmallStreetBets",
)

POSITIVE_KEYWORDS = (
    "moon", "rocket", "breakout", "squeeze", "catalyst", "bullish", "pump",
    "explosive", "gains", "profit", "buy", "long", "hodl", "diamond hands",
)

NEGATIVE_KEYWORDS = (
    "dump", "crash", "avoid", "scam", "bearish", "sell", "short", "paper hands",
    "loss", "bag", "pump and dump", "manipulation",
)

# Uppercase tokens that look like tickers but are words, acronyms or slang.
# Kept verbatim (duplicates and mixed-case entries included) so extraction
# results stay comparable with the published dashboards.
FALSE_POSITIVES = (
    # Common English words (2-5 letters)
    "THE", "AND", "FOR", "ARE", "BUT", "NOT", "YOU", "ALL", "CAN", "HER", "WAS", "ONE",
    "OUR", "HAD", "WHAT", "WERE", "WHEN", "YOUR", "HOW", "SAID", "EACH", "WHICH", "THEIR",
    "TIME", "WILL", "ABOUT", "IF", "UP", "OUT", "MANY", "THEN", "THEM", "THESE", "SO",
    "SOME", "WOULD", "MAKE", "LIKE", "INTO", "HIM", "HAS", "MORE", "GO", "NO", "WAY",
    "COULD", "MY", "THAN", "FIRST", "BEEN", "CALL", "WHO", "ITS", "NOW", "FIND", "LONG",
    "DOWN", "DAY", "DID", "GET", "COME", "MADE", "MAY", "PART", "NEW", "WORK", "USE",
    "MAN", "FIND", "GIVE", "JUST", "WHERE", "MOST", "GOOD", "MUCH", "SOME", "TIME",
    "VERY", "WHEN", "COME", "HERE", "JUST", "LIKE", "LONG", "MAKE", "MANY", "OVER",
    "SUCH", "TAKE", "THAN", "THEM", "WELL", "WERE", "TODAY",
    # Business / finance terms
    "CEO", "CFO", "COO", "CTO", "CMO", "CRO", "CCO", "CDO", "CIO", "CLO", "CPO",
    "IPO", "ICO", "SPO", "APO", "ETF", "REIT", "SPAC",
    "EPS", "P2E", "PEG", "ROI", "ROE", "ROA", "IRR", "NPV", "DCF",
    "SEC", "FDA", "EPA", "DOJ", "FTC", "IRS", "IMF", "FED",
    "AI", "ML", "AR", "VR", "IoT", "SaaS", "PaaS", "IaaS",
    "DD", "TA", "FA", "SI", "DCA", "FOMO", "FUD", "ASDAQ", "PRICE", "PVOTE", "FULL",
    "POST", "OCKED", "WEEK", "LLING", "UEEZE", "LINE", "PANIC", "VEGAN", "CKING", "EYOND",
    "ARKET", "STILL", "HODL", "COUNT", "READ", "LIFE", "SHO", "LDERS", "TRONG", "PENED",
    # Tech / business common words
    "API", "SDK", "UI", "UX", "QA", "PM", "HR", "PR", "IT", "IS", "TO", "YOLO", "TLDR",
    # Common business terms
    "INC", "LLC", "LTD", "CORP", "CO", "HOLDINGS", "GROUP", "INTL", "TECH", "GAAP",
    "YTD", "EOD", "ROW", "QTD", "MTD", "FY", "CY", "EST", "PDT", "GMT",
    "PURE", "WORTH", "HAVE", "WITH", "INESS", "HIVE", "NEXT", "LAST", "BEST",
    "FREE", "PAID", "CALL", "PUT", "BID", "ASK", "NET", "GROSS", "TOTAL", "CHAT", "CROWD",
    "BACK", "ONLY", "KNOW", "WHY", "APES",
    # Prepositions / articles / conjunctions
    "IN", "ON", "AT", "BY", "OF", "OR", "AN", "AS", "BE", "DO", "IF", "SO", "UP", "VS",
    # Verbs
    "AM", "IS", "ARE", "WAS", "WERE", "BE", "BEEN", "GO", "GOES", "WENT",
    "DO", "DOES", "DID", "DONE", "SEE", "SEEN", "SAW", "GET", "GOT", "HOLD", "BUY", "SELL",
    # Adjectives
    "BIG", "BAD", "LOW", "HIGH", "HOT", "COLD", "FAST", "SLOW", "GOOD",
    # Pronouns
    "HE", "SHE", "IT", "WE", "YOU", "THEY", "WHO", "WHAT", "THIS", "THAT",
    # Everyday nouns
    "CAT", "DOG", "CAR", "BUS", "TRAIN", "PLANE", "SHIP", "BOAT", "BIKE",
    "HOME", "HOUSE", "ROOM", "DOOR", "WINDOW", "TABLE", "CHAIR", "BED",
    "FOOD", "WATER", "MILK", "BREAD", "MEAT", "FISH", "CHICKEN",
    "BOOK", "PEN", "PAPER", "PHONE", "COMPUTER", "LAPTOP", "TV",
    "MONEY", "CASH", "CARD", "BANK", "SHOP", "STORE", "MALL",
    "GAME", "PLAY", "FUN", "HAPPY", "SAD", "MAD", "TIRED", "SICK",
    "FRIEND", "FAMILY", "MOTHER", "FATHER", "BROTHER", "SISTER",
    "SCHOOL", "TEACHER", "STUDENT", "CLASS", "TEST", "EXAM",
    "JOB", "WORK", "BOSS", "EMPLOYEE", "OFFICE", "MEETING",
    "HEALTH", "DOCTOR", "HOSPITAL", "MEDICINE", "PILL",
    "SPORT", "FOOTBALL", "BASKETBALL", "TENNIS", "GOLF",
    "MUSIC", "SONG", "MOVIE", "FILM", "SHOW", "PARTY",
    "TRAVEL", "VACATION", "HOTEL", "RESTAURANT", "COFFEE",
    "WEATHER", "SUN", "RAIN", "SNOW", "WIND", "CLOUD",
    "COLOR", "RED", "BLUE", "GREEN", "YELLOW", "BLACK", "WHITE",
    "NUMBER", "ONE", "TWO", "THREE", "FOUR", "FIVE", "SIX", "SEVEN", "EIGHT", "NINE", "TEN",
    # Abbreviations
    "USA", "UK", "EU", "UN", "NATO", "WHO", "UNESCO", "NASA", "FBI", "CIA", "MOON",
    "TV", "PC", "CD", "DVD", "USB", "GPS", "WiFi", "HTML", "CSS", "JS",
    "AM", "PM", "AD", "BC", "ETC", "EG", "IE", "VS", "AKA", "FYI",
    # Chat acronyms
    "OK", "OKAY", "YES", "NO", "YES", "NO", "OK", "OKAY",
    "LOL", "OMG", "WTF", "BTW", "FYI", "ASAP", "RSVP", "VIP", "USD",
    # Contractions and short forms
    "DONT", "WONT", "CANT", "SHOULDNT", "WOULDNT", "COULDNT",
    "IM", "YOURE", "HES", "SHES", "ITS", "WERE", "THEYRE",
    "IVE", "YOUVE", "WEVE", "THEYVE", "HASNT", "HAVENT",
)

# Country-code artifacts removed after the cross-source merge.
INVALID_SYMBOLS = (
    "US", "UK", "EU", "CA", "DE", "FR", "IT", "ES", "NL", "SE", "NO", "DK", "FI", "CH",
    "AT", "BE", "IE", "PT", "GR", "PL", "CZ", "HU", "SK", "SI", "HR", "BG", "RO", "LT",
    "LV", "EE", "CY", "MT", "LU",
)
