# scraper/sources/package_page.py

import math
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

from engine import compute_metric, extract_price, format_metric, read_size
from engine.vocabulary import PipelineConfig, RenderSettings
from scraper.interfaces.models import PackageResult

Logger = Callable[[str], None]
AugmentCallback = Callable[[Tag, float], None]

SKIP_MISSING_FIELDS = "missing_price_or_size"
SKIP_ZERO_VALUES = "zero_price_or_size"


def _log(logger: Optional[Logger], msg: str) -> None:
    """Helper: wenn kein logger übergeben wird -> print()."""
    if logger is not None:
        logger(msg)
    else:
        print(msg)


# ----------------------------------------------------------
# Styles für das eingefügte Fragment
# ----------------------------------------------------------
def build_style_css(render: RenderSettings, container_selector: str, template_selector: str) -> str:
    cls = render.fragment_class
    return f"""
      .{cls} {{
        text-align: center;
        padding: 10px 0;
        margin-top: 15px;
        border-top: 1px dashed #e0e0e0;
        font-size: 1rem;
        color: #333;
        direction: rtl;
        background-color: #f9f9f9;
        border-radius: 0 0 8px 8px;
      }}
      .{cls} span:first-child {{
        font-size: 0.9rem;
        color: #666;
      }}
      {container_selector} > {template_selector} {{
        display: flex;
        flex-direction: column;
        justify-content: space-between;
        height: 100%;
      }}
    """


def build_fragment_html(metric: float, render: RenderSettings) -> str:
    return (
        f'<div class="{render.fragment_class}">'
        f'<span style="font-weight: 600;">{render.label}</span>'
        f'<span style="font-weight: 800; color: #007bff; margin-right: 5px;">{format_metric(metric)}</span>'
        f" {render.currency}"
        f"</div>"
    )


# ----------------------------------------------------------
# Side Table: Element -> Metrik
# ----------------------------------------------------------
class MetricTable:
    """
    Ersetzt das "Out-of-band"-Attribut am DOM-Knoten.

    Der Schlüssel ist standardmäßig die Objekt-Identität; das Element selbst
    wird mitgehalten, damit id() nicht wiederverwendet werden kann.
    """

    def __init__(self, key: Callable[[Any], Any] = id):
        self._key = key
        self._entries: Dict[Any, Tuple[Any, float]] = {}

    def __contains__(self, element) -> bool:
        return self._key(element) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, element, default: Optional[float] = None) -> Optional[float]:
        entry = self._entries.get(self._key(element))
        return entry[1] if entry else default

    def attach(self, element, metric: float) -> None:
        self._entries[self._key(element)] = (element, metric)


def order_by_metric(elements: Iterable[Any], table: MetricTable) -> List[Any]:
    """
    Aufsteigend nach Preis/GB (günstigste zuerst).
    Ohne Metrik -> +inf, landet also hinten. sorted() ist stabil,
    d.h. Gleichstände behalten ihre ursprüngliche Reihenfolge.
    """
    return sorted(elements, key=lambda el: table.get(el, math.inf))


# ----------------------------------------------------------
# Processor: genau eine Augmentierung pro Paket-Box
# ----------------------------------------------------------
class PackageProcessor:
    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        table: Optional[MetricTable] = None,
        logger: Optional[Logger] = None,
    ):
        self.config = config or PipelineConfig()
        self.table = table if table is not None else MetricTable()
        self.logger = logger
        self._subscribers: List[AugmentCallback] = []

    def subscribe(self, callback: AugmentCallback) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    # --- lesen ---------------------------------------------------------
    def read_texts(self, element: Tag) -> Tuple[Optional[str], Optional[str]]:
        sel = self.config.selectors
        price_el = element.select_one(sel.price)
        size_el = element.select_one(sel.size)
        price_text = price_el.get_text(" ", strip=True) if price_el else None
        size_text = size_el.get_text(" ", strip=True) if size_el else None
        return price_text, size_text

    def evaluate(self, element: Tag, index: int = -1) -> PackageResult:
        """Reine Auswertung ohne DOM-Änderung."""
        price_text, size_text = self.read_texts(element)
        if price_text is None or size_text is None:
            return PackageResult(
                index=index,
                price_text=price_text,
                size_text=size_text,
                price=0.0,
                size_gb=0.0,
                size_basis="absent",
                metric=None,
                formatted=None,
                skipped_reason=SKIP_MISSING_FIELDS,
            )

        price = extract_price(price_text)
        reading = read_size(size_text, self.config.vocabulary)
        metric = compute_metric(price, reading.value)

        return PackageResult(
            index=index,
            price_text=price_text,
            size_text=size_text,
            price=price,
            size_gb=reading.value,
            size_basis=reading.basis,
            metric=metric,
            formatted=format_metric(metric) if metric is not None else None,
            skipped_reason=None if metric is not None else SKIP_ZERO_VALUES,
        )

    def has_augmentation(self, element: Tag) -> bool:
        if element in self.table:
            return True
        return element.select_one(f".{self.config.render.fragment_class}") is not None

    # --- schreiben -----------------------------------------------------
    def process(self, element: Any) -> Optional[float]:
        """
        Einziger Einstiegspunkt: prüft zuerst, ob die Box schon augmentiert
        ist, und macht dann höchstens einmal Extraktion + Einfügen.
        Wirft nie; nicht verwertbare Boxen bleiben unverändert.
        """
        if not isinstance(element, Tag):
            return None

        if self.has_augmentation(element):
            return self._adopt(element)

        result = self.evaluate(element)

        if result.skipped_reason == SKIP_MISSING_FIELDS:
            _log(self.logger, "⚠️ Could not find price or size element in package box – skipped")
            return None

        if result.metric is None:
            _log(
                self.logger,
                f"⚠️ Skipping package due to zero price or size "
                f"(price={result.price_text!r}, size={result.size_text!r})",
            )
            return None

        if result.size_reading.is_heuristic:
            _log(
                self.logger,
                f"ℹ️ No unit next to size {result.size_text!r} – "
                f"guessed {result.size_gb:g} GB ({result.size_basis})",
            )

        self.attach(element, result.metric)
        self.insert_fragment(element, self.render_fragment(result.metric))

        for cb in list(self._subscribers):
            cb(element, result.metric)

        return result.metric

    def attach(self, element: Tag, metric: float) -> None:
        self.table.attach(element, metric)
        element[self.config.render.metric_attribute] = str(metric)

    def _adopt(self, element: Tag) -> Optional[float]:
        # Box wurde schon früher (z.B. in einem gespeicherten HTML) augmentiert:
        # Metrik aus dem Attribut zurücklesen, nicht neu berechnen.
        if element in self.table:
            return self.table.get(element)

        raw = element.get(self.config.render.metric_attribute)
        try:
            metric = float(raw) if raw is not None else None
        except (TypeError, ValueError):
            metric = None

        if metric is not None and metric > 0 and not math.isinf(metric):
            self.table.attach(element, metric)
            return metric
        return None

    def render_fragment(self, metric: float) -> Tag:
        markup = build_fragment_html(metric, self.config.render)
        return BeautifulSoup(markup, "html.parser").find("div")

    def insert_fragment(self, element: Tag, fragment: Tag) -> None:
        """
        Einfügepunkt:
        1. im inneren Template vor dem "خرید از اعتبار"-Button
        2. sonst ans Ende des Templates
        3. ohne Template ans Ende der Box
        """
        sel = self.config.selectors
        template = element.select_one(sel.template)
        if template is None:
            element.append(fragment)
            return

        buy_credit = template.select_one(sel.buy_credit)
        if buy_credit is not None:
            buy_credit.insert_before(fragment)
        else:
            template.append(fragment)

    def order_by_metric(self, elements: Iterable[Any]) -> List[Any]:
        return order_by_metric(elements, self.table)


# ----------------------------------------------------------
# Page: ganzes HTML-Dokument
# ----------------------------------------------------------
class PackagePage:
    def __init__(
        self,
        html: str,
        config: Optional[PipelineConfig] = None,
        logger: Optional[Logger] = None,
        processor: Optional[PackageProcessor] = None,
    ):
        self.config = config or PipelineConfig()
        self.logger = logger
        self.soup = BeautifulSoup(html or "", "html.parser")
        self.processor = processor or PackageProcessor(self.config, logger=logger)
        self._style_skipped = False
        self.processor.subscribe(lambda _el, _metric: self.ensure_style())

    @property
    def table(self) -> MetricTable:
        return self.processor.table

    def packages(self) -> List[Tag]:
        return self.soup.select(self.config.selectors.container)

    def process(self, element: Tag) -> Optional[float]:
        return self.processor.process(element)

    def process_all(self) -> int:
        """Alle Paket-Boxen verarbeiten; gibt die Anzahl mit Metrik zurück."""
        boxes = self.packages()
        done = 0
        for box in boxes:
            if self.processor.process(box) is not None:
                done += 1
        _log(self.logger, f"📦 {done}/{len(boxes)} packages with price per GB")
        return done

    def results(self) -> List[PackageResult]:
        rows: List[PackageResult] = []
        for idx, box in enumerate(self.packages()):
            row = self.processor.evaluate(box, index=idx)
            known = self.table.get(box)
            if known is not None and row.metric is None:
                # augmentiert aus gespeichertem HTML, Texte evtl. nicht mehr lesbar
                row.metric = known
                row.formatted = format_metric(known)
                row.skipped_reason = None
            rows.append(row)
        return rows

    def ensure_style(self) -> bool:
        render = self.config.render
        if self.soup.find("style", id=render.style_id) is not None:
            return False

        head = self.soup.head
        if head is None:
            # Fragment ohne <head> (z.B. nur die Kartenliste): einmal melden
            if not self._style_skipped:
                self._style_skipped = True
                _log(self.logger, "⚠️ Document has no <head> – style block skipped")
            return False

        style = self.soup.new_tag("style", id=render.style_id)
        style.string = build_style_css(
            render,
            self.config.selectors.container,
            self.config.selectors.template,
        )
        head.append(style)
        return True

    def order_by_metric(self, elements: Optional[Iterable[Tag]] = None) -> List[Tag]:
        return self.processor.order_by_metric(self.packages() if elements is None else elements)

    def sort_packages(self) -> List[Tag]:
        """
        Sortiert die Boxen je Eltern-Element im DOM um. Nur die Plätze der
        Boxen werden neu belegt, andere Geschwister bleiben wo sie sind.
        """
        groups: Dict[int, List[Tag]] = {}
        for box in self.packages():
            groups.setdefault(id(box.parent), []).append(box)

        ordered_all: List[Tag] = []
        for boxes in groups.values():
            ordered = self.order_by_metric(boxes)
            markers = []
            for box in boxes:
                marker = self.soup.new_tag("ppgb-slot")
                box.replace_with(marker)
                markers.append(marker)
            for marker, box in zip(markers, ordered):
                marker.replace_with(box)
            ordered_all.extend(ordered)

        return ordered_all

    def html(self) -> str:
        return str(self.soup)
