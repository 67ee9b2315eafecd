from typing import NamedTuple


class City(NamedTuple):
    name: str
    lat: float
    lon: float


# Candidate aurora cities offered to the client for default selection
CITIES = (
    City("Tromsø, NO", 69.6492, 18.9553),
    City("Reykjavík, IS", 64.1466, -21.9426),
    City("Fairbanks, US", 64.8378, -147.7164),
    City("Yellowknife, CA", 62.4540, -114.3718),
    City("Rovaniemi, FI", 66.5039, 25.7294),
    City("Abisko, SE", 68.3538, 18.8300),
    City("Kiruna, SE", 67.8558, 20.2253),
    City("Murmansk, RU", 68.9585, 33.0827),
    City("Ivalo, FI", 68.6531, 27.5399),
    City("Nuuk, GL", 64.1814, -51.6941),
    City("Akureyri, IS", 65.6885, -18.1262),
    City("Nome, US", 64.5011, -165.4064),
)
