"""PC component catalog for the build configurator.

Prices are approximate INR street prices; store links are search URLs.
The compatibility attributes (socket, memory type, TDP, ...) feed the rules
in ``configurator``.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Category:
    id: str
    name: str


CATEGORIES: tuple[Category, ...] = (
    Category("processor", "Processor"),
    Category("graphics", "Graphics Card"),
    Category("memory", "RAM"),
    Category("storage", "Storage"),
    Category("motherboard", "Motherboard"),
    Category("psu", "Power Supply"),
    Category("case", "Case"),
    Category("cooling", "Cooling"),
)
CATEGORY_IDS = tuple(category.id for category in CATEGORIES)


@dataclass(frozen=True)
class PCComponent:
    id: str
    category: str
    name: str
    brand: str
    price: int
    specs: tuple[str, ...]
    store_url: str
    recommended: bool = False
    socket: str | None = None  # processor / motherboard
    memory_type: str | None = None  # memory / motherboard
    tdp: int | None = None  # processor / graphics, watts
    wattage: int | None = None  # psu
    form_factor: str | None = None  # motherboard
    supported_form_factors: frozenset[str] = field(default_factory=frozenset)  # case
    supported_sockets: frozenset[str] = field(default_factory=frozenset)  # cooling
    includes_cooler: bool = False  # processor


def _store(query: str) -> str:
    return f"https://www.amazon.in/s?k={query}"


PC_COMPONENTS: tuple[PCComponent, ...] = (
    # Processors
    PCComponent(
        id="cpu-1",
        category="processor",
        name="AMD Ryzen 5 5600X",
        brand="AMD",
        price=14999,
        specs=("6 Cores / 12 Threads", "3.7 GHz Base / 4.6 GHz Boost", "65W TDP", "PCIe 4.0"),
        store_url=_store("AMD+Ryzen+5+5600X"),
        recommended=True,
        socket="AM4",
        tdp=65,
        includes_cooler=True,
    ),
    PCComponent(
        id="cpu-2",
        category="processor",
        name="Intel Core i5-12400F",
        brand="Intel",
        price=13499,
        specs=("6 Cores / 12 Threads", "2.5 GHz Base / 4.4 GHz Boost", "65W TDP", "LGA 1700"),
        store_url=_store("Intel+Core+i5-12400F"),
        socket="LGA1700",
        tdp=65,
        includes_cooler=True,
    ),
    PCComponent(
        id="cpu-3",
        category="processor",
        name="AMD Ryzen 7 5800X",
        brand="AMD",
        price=22999,
        specs=("8 Cores / 16 Threads", "3.8 GHz Base / 4.7 GHz Boost", "105W TDP", "PCIe 4.0"),
        store_url=_store("AMD+Ryzen+7+5800X"),
        socket="AM4",
        tdp=105,
    ),
    # Graphics Cards
    PCComponent(
        id="gpu-1",
        category="graphics",
        name="NVIDIA RTX 4060",
        brand="NVIDIA",
        price=29999,
        specs=("8GB GDDR6", "DLSS 3", "Ray Tracing", "115W TDP"),
        store_url=_store("RTX+4060"),
        recommended=True,
        tdp=115,
    ),
    PCComponent(
        id="gpu-2",
        category="graphics",
        name="AMD RX 7600",
        brand="AMD",
        price=26999,
        specs=("8GB GDDR6", "FSR 3", "Ray Tracing", "165W TDP"),
        store_url=_store("AMD+RX+7600"),
        tdp=165,
    ),
    PCComponent(
        id="gpu-3",
        category="graphics",
        name="NVIDIA RTX 4070",
        brand="NVIDIA",
        price=49999,
        specs=("12GB GDDR6X", "DLSS 3", "Ray Tracing", "200W TDP"),
        store_url=_store("RTX+4070"),
        tdp=200,
    ),
    # RAM
    PCComponent(
        id="ram-1",
        category="memory",
        name="Corsair Vengeance LPX 16GB",
        brand="Corsair",
        price=3499,
        specs=("16GB (2x8GB)", "DDR4 3200MHz", "CL16", "XMP 2.0"),
        store_url=_store("Corsair+Vengeance+LPX+16GB+DDR4"),
        recommended=True,
        memory_type="DDR4",
    ),
    PCComponent(
        id="ram-2",
        category="memory",
        name="G.Skill Trident Z RGB 32GB",
        brand="G.Skill",
        price=7999,
        specs=("32GB (2x16GB)", "DDR4 3600MHz", "CL18", "RGB Lighting"),
        store_url=_store("G.Skill+Trident+Z+RGB+32GB"),
        memory_type="DDR4",
    ),
    # Storage
    PCComponent(
        id="storage-1",
        category="storage",
        name="Samsung 970 EVO Plus 1TB",
        brand="Samsung",
        price=6499,
        specs=("1TB NVMe SSD", "3500MB/s Read", "3300MB/s Write", "M.2 2280"),
        store_url=_store("Samsung+970+EVO+Plus+1TB"),
        recommended=True,
    ),
    PCComponent(
        id="storage-2",
        category="storage",
        name="WD Blue SN570 500GB",
        brand="Western Digital",
        price=3299,
        specs=("500GB NVMe SSD", "3500MB/s Read", "2300MB/s Write", "M.2 2280"),
        store_url=_store("WD+Blue+SN570+500GB"),
    ),
    PCComponent(
        id="storage-3",
        category="storage",
        name="Seagate Barracuda 2TB HDD",
        brand="Seagate",
        price=4299,
        specs=("2TB HDD", "7200 RPM", "256MB Cache", "SATA 6Gb/s"),
        store_url=_store("Seagate+Barracuda+2TB"),
    ),
    # Motherboards
    PCComponent(
        id="mobo-1",
        category="motherboard",
        name="MSI B550-A PRO",
        brand="MSI",
        price=10999,
        specs=("AMD B550", "ATX", "PCIe 4.0", "DDR4 4400MHz"),
        store_url=_store("MSI+B550-A+PRO"),
        recommended=True,
        socket="AM4",
        memory_type="DDR4",
        form_factor="ATX",
    ),
    PCComponent(
        id="mobo-2",
        category="motherboard",
        name="ASUS ROG Strix B660-A",
        brand="ASUS",
        price=15999,
        specs=("Intel B660", "ATX", "PCIe 5.0", "DDR5 Support"),
        store_url=_store("ASUS+ROG+Strix+B660-A"),
        socket="LGA1700",
        memory_type="DDR5",
        form_factor="ATX",
    ),
    # Power Supply
    PCComponent(
        id="psu-1",
        category="psu",
        name="Corsair RM650",
        brand="Corsair",
        price=7499,
        specs=("650W", "80+ Gold", "Fully Modular", "Zero RPM Mode"),
        store_url=_store("Corsair+RM650"),
        recommended=True,
        wattage=650,
    ),
    PCComponent(
        id="psu-2",
        category="psu",
        name="Cooler Master MWE 750 V2",
        brand="Cooler Master",
        price=5999,
        specs=("750W", "80+ Bronze", "Semi-Modular", "5 Year Warranty"),
        store_url=_store("Cooler+Master+MWE+750"),
        wattage=750,
    ),
    # Cases
    PCComponent(
        id="case-1",
        category="case",
        name="NZXT H510",
        brand="NZXT",
        price=6999,
        specs=("Mid-Tower ATX", "Tempered Glass", "Cable Management", "USB 3.1"),
        store_url=_store("NZXT+H510"),
        recommended=True,
        supported_form_factors=frozenset({"ATX", "Micro-ATX", "Mini-ITX"}),
    ),
    PCComponent(
        id="case-2",
        category="case",
        name="Corsair 4000D Airflow",
        brand="Corsair",
        price=8499,
        specs=("Mid-Tower ATX", "High Airflow", "Tempered Glass", "Tool-Free"),
        store_url=_store("Corsair+4000D+Airflow"),
        supported_form_factors=frozenset({"ATX", "Micro-ATX", "Mini-ITX"}),
    ),
    # Cooling
    PCComponent(
        id="cooler-1",
        category="cooling",
        name="Cooler Master Hyper 212",
        brand="Cooler Master",
        price=2999,
        specs=("120mm Tower", "4 Heat Pipes", "AMD/Intel Compatible", "RGB"),
        store_url=_store("Cooler+Master+Hyper+212"),
        recommended=True,
        supported_sockets=frozenset({"AM4", "AM5", "LGA1700", "LGA1200"}),
    ),
    PCComponent(
        id="cooler-2",
        category="cooling",
        name="NZXT Kraken X53",
        brand="NZXT",
        price=11999,
        specs=("240mm AIO", "Infinity Mirror", "CAM Software", "RGB"),
        store_url=_store("NZXT+Kraken+X53"),
        supported_sockets=frozenset({"AM4", "AM5", "LGA1700", "LGA1200"}),
    ),
)


class ComponentCatalog:
    """Lookup over a fixed component list."""

    def __init__(self, components: tuple[PCComponent, ...] = PC_COMPONENTS) -> None:
        self.components = components
        self._by_id = {component.id: component for component in components}

    def get(self, component_id: str) -> PCComponent | None:
        return self._by_id.get(component_id)

    def by_category(self, category: str) -> list[PCComponent]:
        return [component for component in self.components if component.category == category]

    def recommended(self) -> list[PCComponent]:
        return [component for component in self.components if component.recommended]
