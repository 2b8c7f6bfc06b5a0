import os
import sys

from PyQt6.QtWidgets import QApplication, QStyleFactory

from backend.services.collection_controller import CollectionController
from backend.services.input_router import InputRouter
from backend.services.navigation_controller import NavigationStateMachine
from backend.services.persistence_store import PersistenceStore
from backend.services.recommendation_service import RecommendationController
from backend.utils.key_value_storage import FileKeyValueStorage
from backend.utils.preferences import load_preferences
from common.log_utils import log_info
from config import get_config
from frontend.vault_window import VaultWindow
from frontend.widgets import style as ui_style


def _apply_style(app: QApplication) -> None:
    available = [str(s) for s in QStyleFactory.keys()]
    prefer = os.environ.get("QT_STYLE_OVERRIDE") or os.environ.get("QT_STYLE") or "Fusion"
    if prefer not in available and available:
        prefer = available[0] if "Fusion" not in available else "Fusion"
    style = QStyleFactory.create(prefer)
    if style is not None:
        app.setStyle(style)
    ui_style.apply_app_style(app)


def build_window(initial_item_id=None) -> VaultWindow:
    config = get_config()
    preferences = load_preferences()
    store = PersistenceStore(FileKeyValueStorage(config.storage_dir))
    collection = CollectionController(store)
    collection.load()
    machine = NavigationStateMachine(
        collection.items,
        theme=preferences.theme,
        initial_item_id=initial_item_id,
    )
    router = InputRouter(machine)
    window = VaultWindow(collection, machine, router, RecommendationController(), preferences)
    log_info(f"Vault ready: {len(collection)} records in {config.storage_dir}", "APP")
    return window


def main() -> int:
    app = QApplication(sys.argv)
    _apply_style(app)

    # Optional record id to open straight into inspection
    viewer = build_window(sys.argv[1] if len(sys.argv) > 1 else None)
    viewer.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
