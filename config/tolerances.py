"""
NodeSnap - Zentralisierte Toleranz-Konfiguration
=================================================

Alle Snapping-Toleranzen an einem Ort.

Toleranz-Philosophie:
- Snap-Resolution: Pixel (visueller Fangbereich, zoom-unabhängig)
- Punkt-Vergleich: Karteneinheiten (Projektion)
- Spatial Index: Quadtree-Parameter für die Knoten-Suche

Verwendung:
    from config.tolerances import Tolerances

    # Direkt als Klassenvariablen
    radius = Tolerances.SNAP_RESOLUTION_PX

    # Oder via Convenience-Funktionen
    from config.tolerances import snap_resolution
    radius = snap_resolution()
"""


class Tolerances:
    """
    Zentrale Toleranz-Konstanten für NodeSnap.

    Kategorien:
    - SNAP_*: Fangbereich beim Digitalisieren
    - COMPARE_*: Koordinaten-Vergleiche
    - QUADTREE_*: Räumlicher Index der Knoten
    """

    # =========================================================================
    # Snapping
    # =========================================================================

    # Snap-Radius für UI in Pixel (visueller Fangbereich)
    # Größere Werte = leichteres Snapping, aber weniger Präzision
    SNAP_RESOLUTION_PX = 10.0

    # Grenzen für benutzerdefinierte Snap-Radien
    SNAP_RESOLUTION_PX_MIN = 1.0
    SNAP_RESOLUTION_PX_MAX = 80.0

    # =========================================================================
    # Vergleichs-Toleranzen
    # =========================================================================

    # Punkt-Vergleich (sind zwei Koordinaten "gleich"?)
    COMPARE_POINT = 1e-6  # Karteneinheiten

    # =========================================================================
    # Spatial Index
    # =========================================================================

    # Maximale Items pro Quadtree-Knoten vor dem Split
    QUADTREE_MAX_ITEMS = 8

    # Maximale Tiefe (danach sammeln sich Items im Blatt)
    QUADTREE_MAX_DEPTH = 12

    # Halbe Kantenlänge der initialen Root-Bounds um den ersten Knoten
    QUADTREE_INITIAL_HALF_SIZE = 1000.0


# =============================================================================
# Convenience-Funktionen
# =============================================================================

def snap_resolution() -> float:
    """Gibt den Standard-Snap-Radius in Pixel zurück."""
    return Tolerances.SNAP_RESOLUTION_PX


# =============================================================================
# Toleranz-Validierung (für Debugging)
# =============================================================================

def validate_tolerances():
    """
    Validiert dass alle Toleranzen sinnvolle Werte haben.
    Nützlich für Tests und Debugging.
    """
    issues = []

    if not (0.0 < Tolerances.SNAP_RESOLUTION_PX_MIN <= Tolerances.SNAP_RESOLUTION_PX_MAX):
        issues.append(
            f"SNAP_RESOLUTION_PX_MIN/MAX ungültig: "
            f"{Tolerances.SNAP_RESOLUTION_PX_MIN}..{Tolerances.SNAP_RESOLUTION_PX_MAX}"
        )

    # Default muss innerhalb der Grenzen liegen
    if not (Tolerances.SNAP_RESOLUTION_PX_MIN
            <= Tolerances.SNAP_RESOLUTION_PX
            <= Tolerances.SNAP_RESOLUTION_PX_MAX):
        issues.append(f"SNAP_RESOLUTION_PX außerhalb der Grenzen: {Tolerances.SNAP_RESOLUTION_PX}")

    if Tolerances.QUADTREE_MAX_ITEMS < 1 or Tolerances.QUADTREE_MAX_DEPTH < 0:
        issues.append(
            f"Quadtree-Parameter ungültig: items={Tolerances.QUADTREE_MAX_ITEMS}, "
            f"depth={Tolerances.QUADTREE_MAX_DEPTH}"
        )

    return issues


# Automatische Validierung beim Import (nur Warnung, kein Fehler)
_validation_issues = validate_tolerances()
if _validation_issues:
    from loguru import logger
    for issue in _validation_issues:
        logger.warning(f"Toleranz-Validierung: {issue}")
