from __future__ import annotations

# Column layout used for CSV import/export of place catalogues.
PLACE_COLUMNS = ["id", "name", "kind", "city", "country", "lat", "lon", "alt_names"]

# Well-known places seeded first so generated catalogues contain realistic
# multilingual name variants. (name, kind, city, country, lat, lon, alt names)
LANDMARK_PROFILES: list[tuple[str, str, str, str, float, float, tuple[str, ...]]] = [
    ("Sagrada Familia", "landmark", "Barcelona", "ES", 41.4036, 2.1744, ("Basílica de la Sagrada Família",)),
    ("Park Güell", "park", "Barcelona", "ES", 41.4145, 2.1527, ("Parc Güell",)),
    ("Casa Batlló", "landmark", "Barcelona", "ES", 41.3916, 2.1649, ()),
    ("La Boqueria", "market", "Barcelona", "ES", 41.3817, 2.1716, ("Mercat de Sant Josep de la Boqueria",)),
    ("Museo del Prado", "museum", "Madrid", "ES", 40.4138, -3.6921, ("Prado Museum",)),
    ("Eiffel Tower", "landmark", "Paris", "FR", 48.8584, 2.2945, ("Tour Eiffel",)),
    ("Louvre Museum", "museum", "Paris", "FR", 48.8606, 2.3376, ("Musée du Louvre",)),
    ("Notre-Dame de Paris", "church", "Paris", "FR", 48.8530, 2.3499, ("Cathédrale Notre-Dame",)),
    ("Colosseum", "landmark", "Rome", "IT", 41.8902, 12.4922, ("Colosseo", "Flavian Amphitheatre")),
    ("Trevi Fountain", "landmark", "Rome", "IT", 41.9009, 12.4833, ("Fontana di Trevi",)),
    ("St. Peter's Basilica", "church", "Vatican City", "VA", 41.9022, 12.4539, ("Basilica di San Pietro",)),
    ("Brandenburg Gate", "landmark", "Berlin", "DE", 52.5163, 13.3777, ("Brandenburger Tor",)),
    ("British Museum", "museum", "London", "GB", 51.5194, -0.1270, ()),
    ("Borough Market", "market", "London", "GB", 51.5055, -0.0910, ()),
    ("Rijksmuseum", "museum", "Amsterdam", "NL", 52.3600, 4.8852, ()),
    ("Senso-ji", "temple", "Tokyo", "JP", 35.7148, 139.7967, ("Asakusa Kannon",)),
    ("Hagia Sophia", "mosque", "Istanbul", "TR", 41.0086, 28.9802, ("Ayasofya",)),
    ("Charles Bridge", "landmark", "Prague", "CZ", 50.0865, 14.4114, ("Karlův most",)),
]

# City centres for synthetic venues: (city, country, lat, lon)
CITY_CENTRES: list[tuple[str, str, float, float]] = [
    ("Barcelona", "ES", 41.3874, 2.1686),
    ("Madrid", "ES", 40.4168, -3.7038),
    ("Paris", "FR", 48.8566, 2.3522),
    ("Rome", "IT", 41.9028, 12.4964),
    ("Berlin", "DE", 52.5200, 13.4050),
    ("London", "GB", 51.5072, -0.1276),
    ("Lisbon", "PT", 38.7223, -9.1393),
    ("Tokyo", "JP", 35.6762, 139.6503),
]

VENUE_KINDS = ["restaurant", "cafe", "bar", "museum", "park", "shop", "hotel", "viewpoint"]

NAME_ADJECTIVES = [
    "Golden",
    "Blue",
    "Old",
    "Little",
    "Royal",
    "Hidden",
    "Green",
    "Silver",
    "Grand",
    "Lucky",
]
NAME_NOUNS = [
    "Lantern",
    "Olive",
    "Harbour",
    "Garden",
    "Anchor",
    "Fig",
    "Crown",
    "Sparrow",
    "Market",
    "Terrace",
    "Lemon",
    "Bridge",
]

# Kinds that OCR/LLM extraction commonly confuses with each other.
KIND_CONFUSIONS = {
    "landmark": "church",
    "church": "landmark",
    "cafe": "restaurant",
    "restaurant": "cafe",
    "bar": "restaurant",
    "temple": "landmark",
    "mosque": "landmark",
}
