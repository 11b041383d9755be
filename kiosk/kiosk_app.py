"""Main Textual app class."""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

from rich.text import Text
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.events import Key
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Header, Static

from kiosk.analysis import AnalysisError, get_monthly_analysis
from kiosk.backup import BackupError, backup_filename, dump_backup, export_backup, import_backup
from kiosk.catalog import SORT_KEYS
from kiosk.choice_modal import ChoiceModal
from kiosk.constant import EXPENSE_CATEGORY_LABELS, MONTH_NAMES, PAYMENT_METHOD_LABELS, PRODUCT_CATEGORY_LABELS
from kiosk.ledger import change_due, new_entry
from kiosk.models import Order, PaymentMethod, Product
from kiosk.order_store import is_long_wait, wait_time
from kiosk.orders import OrderDraft
from kiosk.printer import check_printer_dependencies, print_bill
from kiosk.prompt_modal import PromptModal, number, required
from kiosk.reporting import analysis_data, csv_filename, export_csv, summarize_month
from kiosk.rendering import (
    format_item_label,
    format_order_label,
    format_product_label,
    format_totals,
    payment_label,
    stock_label,
    stock_style,
)
from kiosk.security import PinSetup
from kiosk.state import KioskState
from kiosk.utils import current_date_extended, format_currency, format_date_display, to_decimal

logger = logging.getLogger(__name__)

VIEWS = ("orders", "stock", "finance")


class KioskApp(App):
    """A Textual app for running tabs, stock and the cash ledger of a beach kiosk."""

    TITLE = "Kiosk Ledger"

    CSS = """
    Screen {
        layout: vertical;
    }

    #main-layout {
        height: 1fr;
    }

    #list-pane {
        width: 2fr;
        border: round $primary;
        padding: 1;
    }

    #detail-pane {
        width: 3fr;
        border: round $secondary;
        padding: 1;
    }

    #list-body {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #detail-body {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #status-bar {
        height: 3;
        border: heavy $secondary;
        padding: 0 1;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    view = reactive("orders")
    input_state = reactive("normal")
    search_text = reactive("")
    list_index = reactive(0)
    item_index = reactive(0)
    result_index = reactive(0)

    BINDINGS = [
        ("f1", "show_view('orders')", "Comandas"),
        ("f2", "show_view('stock')", "Estoque"),
        ("f3", "show_view('finance')", "Financeiro"),
        ("up", "move(-1)", "Previous"),
        ("down", "move(1)", "Next"),
        ("tab", "move(1)", "Next result"),
        ("enter", "confirm", "Open/Add"),
        ("backspace", "backspace_query", "Delete query char"),
        Binding("ctrl+s", "save_draft", "Save tab", priority=True),
        ("escape", "cancel", "Back"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, db_path: str | Path | None = None) -> None:
        super().__init__()
        self.db_path = db_path
        self.state: KioskState | None = None
        self.draft: OrderDraft | None = None
        self.show_closed = False
        self.stock_sort = "stock_asc"
        self.stock_low_only = False
        self.report_year = date.today().year
        self.report_month = date.today().month
        self.analysis_text = ""
        self.system_status = ""
        self.pin_setup = PinSetup()

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Vertical(id="list-pane"):
                yield Static(id="list-title", classes="pane-title")
                yield Static(id="list-body")
            with Vertical(id="detail-pane"):
                yield Static(id="detail-title", classes="pane-title")
                yield Static(id="detail-body")
        yield Static(id="status-bar")

    def on_mount(self) -> None:
        self.state = KioskState.load(self.db_path)
        self.sub_title = f"{self.state.settings.kiosk_name} · {current_date_extended()}"
        _, msg = check_printer_dependencies()
        self.system_status = msg
        logger.info("app_mounted printer_status=%r", msg)
        self._refresh_all()

    def _busy(self) -> bool:
        """No state yet, or a modal owns the keyboard."""
        return self.state is None or isinstance(self.screen, ModalScreen)

    # ---- key routing -------------------------------------------------

    def on_key(self, event: Key) -> None:
        if self._busy():
            return
        if not event.is_printable or not event.character:
            return

        char = event.character
        if self.input_state == "search":
            self.search_text += char
            self.result_index = 0
            self._refresh_all()
            event.stop()
            return

        handler = {
            "orders": self._orders_key,
            "stock": self._stock_key,
            "finance": self._finance_key,
        }[self.view]
        if handler(char):
            event.stop()

    def _orders_key(self, char: str) -> bool:
        if char in "jk":
            self.action_move(1 if char == "j" else -1)
            return True

        if self.draft is None:
            if char == "n":
                self.push_screen(
                    PromptModal("Nova comanda", "Mesa / Nome", validate=required("Informe a mesa ou nome.")),
                    self._open_new_draft,
                )
            elif char == "x":
                self._delete_selected_order()
            elif char == "c":
                self.show_closed = not self.show_closed
                self.list_index = 0
                self._refresh_all()
            else:
                return False
            return True

        item = self._selected_item()
        if char == "/":
            self.input_state = "search"
            self.search_text = ""
            self.result_index = 0
        elif char in "+=" and item is not None:
            self.draft.increment_quantity(item.id)
        elif char == "-" and item is not None:
            self.draft.decrement_quantity(item.id)
        elif char == "d" and item is not None:
            self.draft.remove_item(item.id)
        elif char == "e" and item is not None:
            self.draft.toggle_delivered(item.id)
        elif char == "g" and item is not None:
            self.draft.toggle_courtesy(item.id)
        elif char == "t":
            self.draft.service_fee = not self.draft.service_fee
        elif char == "a":
            self.push_screen(
                PromptModal("Item manual", "Nome do item", validate=required("Informe o nome.")),
                self._custom_item_name_entered,
            )
        elif char == "o":
            self.push_screen(
                PromptModal("Desconto", "Valor em R$", validate=number("Valor inválido.")),
                self._discount_entered,
            )
        elif char == "p":
            self.push_screen(
                PromptModal("Dividir conta", "Número de pessoas", str(self.draft.split_count), digits_only=True),
                self._split_entered,
            )
        elif char == "b":
            self.push_screen(PromptModal("Código de barras", "Digite ou escaneie o código"), self._barcode_entered)
        elif char == "w":
            self.push_screen(
                PromptModal("Editar nome", "Mesa / Nome", self.draft.table_or_name, validate=required("Informe a mesa ou nome.")),
                self._rename_draft,
            )
        elif char == "f":
            self._start_closing()
        elif char == "r":
            self._print_draft()
        else:
            return False
        self._refresh_all()
        return True

    def _stock_key(self, char: str) -> bool:
        product = self._selected_product()
        if char in "jk":
            self.action_move(1 if char == "j" else -1)
        elif char in "+=" and product is not None:
            self.state.catalog.adjust_stock(product.id, 1)
        elif char == "-" and product is not None:
            self.state.catalog.adjust_stock(product.id, -1)
        elif char == "l":
            self.stock_low_only = not self.stock_low_only
            self.list_index = 0
        elif char == "o":
            self.stock_sort = SORT_KEYS[(SORT_KEYS.index(self.stock_sort) + 1) % len(SORT_KEYS)]
        elif char == "n":
            self._edit_product(None)
        elif char == "e" and product is not None:
            self._edit_product(product)
        elif char == "x" and product is not None:
            self.state.catalog.remove(product.id)
            self.system_status = f"Produto removido: {product.name}"
        elif char == "b":
            self.push_screen(PromptModal("Buscar código", "Digite ou escaneie o código"), self._stock_barcode_entered)
        elif char == "c" and product is not None:
            self.push_screen(
                PromptModal("Vincular código", f"Código para {product.name}", product.barcode or ""),
                lambda code: self._link_barcode(product, code),
            )
        else:
            return False
        self._refresh_all()
        return True

    def _finance_key(self, char: str) -> bool:
        if self.state.lock.locked:
            return False
        if char in "jk":
            self.action_move(1 if char == "j" else -1)
        elif char in "[]":
            self._shift_month(-1 if char == "[" else 1)
        elif char == "a":
            options = [(value, label) for value, label in EXPENSE_CATEGORY_LABELS.items()]
            self.push_screen(ChoiceModal("Novo lançamento", options, "Categoria"), self._entry_category_chosen)
        elif char == "x":
            self._delete_selected_entry()
        elif char == "v":
            self._export_csv()
        elif char == "i":
            self._start_analysis()
        elif char == "B":
            self._export_backup()
        elif char == "R":
            self.push_screen(PromptModal("Restaurar backup", "Caminho do arquivo .json"), self._restore_backup)
        elif char == "P":
            self.pin_setup.reset()
            self._prompt_pin()
        elif char == "U":
            self.state.settings.security_pin = None
            self.state.save_settings()
            self.system_status = "PIN removido"
        elif char == "G":
            self.push_screen(
                PromptModal("Meta mensal", "Valor em R$", str(self.state.settings.monthly_goal), validate=number("Valor inválido.")),
                self._goal_entered,
            )
        elif char == "X":
            options = [("no", "Cancelar"), ("yes", "Apagar lançamentos e comandas")]
            self.push_screen(ChoiceModal("Limpar dados", options, "O catálogo e as configurações ficam."), self._clear_confirmed)
        else:
            return False
        self._refresh_all()
        return True

    # ---- actions ------------------------------------------------------

    def action_show_view(self, view: str) -> None:
        if self._busy() or view not in VIEWS:
            return
        if self.view == "finance" and view != "finance":
            self.state.lock.lock()
        self.view = view
        self.input_state = "normal"
        self.list_index = 0
        self._refresh_all()

    def action_move(self, delta: int) -> None:
        if self._busy():
            return
        if self.input_state == "search":
            results = self._search_results()
            if results:
                self.result_index = (self.result_index + delta) % len(results)
        elif self.view == "orders" and self.draft is not None:
            if self.draft.items:
                self.item_index = (self.item_index + delta) % len(self.draft.items)
        else:
            total = len(self._list_rows())
            if total:
                self.list_index = (self.list_index + delta) % total
        self._refresh_all()

    def action_confirm(self) -> None:
        if self._busy():
            return
        if self.input_state == "search":
            results = self._search_results()
            if results:
                self.draft.add_item(results[self.result_index % len(results)])
            self._refresh_all()
            return
        if self.view == "orders" and self.draft is None and not self.show_closed:
            orders = self._list_rows()
            if orders:
                self.draft = OrderDraft.from_order(orders[self.list_index % len(orders)])
                self.item_index = 0
        elif self.view == "stock":
            product = self._selected_product()
            if product is not None:
                self.push_screen(
                    PromptModal("Ajustar estoque", product.name, str(product.stock), digits_only=True),
                    lambda value: self._stock_entered(product, value),
                )
        elif self.view == "finance" and self.state.lock.locked:
            self.push_screen(
                PromptModal("Área financeira", "Digite o PIN", digits_only=True, max_length=4, secret=True),
                self._unlock_entered,
            )
        self._refresh_all()

    def action_backspace_query(self) -> None:
        if self._busy() or self.input_state != "search" or not self.search_text:
            return
        self.search_text = self.search_text[:-1]
        self.result_index = 0
        self._refresh_all()

    def action_cancel(self) -> None:
        if self._busy():
            return
        if self.input_state == "search":
            self.input_state = "normal"
            self.search_text = ""
        elif self.view == "orders" and self.draft is not None:
            self.draft = None
            self.system_status = "Edição descartada"
        self._refresh_all()

    def action_save_draft(self) -> None:
        if self._busy() or self.draft is None:
            return
        try:
            order = self.draft.to_order()
        except ValueError as exc:
            self.system_status = str(exc)
            self._refresh_all()
            return
        if self.state.orders.get(order.id) is not None:
            self.state.orders.update(order)
        else:
            self.state.orders.add(order)
        logger.info("tab_saved id=%s items=%d", order.id, len(order.items))
        self.system_status = f"Comanda salva: {order.table_or_name}"
        self.draft = None
        self.input_state = "normal"
        self._refresh_all()

    # ---- orders -------------------------------------------------------

    def _open_new_draft(self, name: str | None) -> None:
        if not name:
            return
        existing = self.state.orders.find_open_by_table(name)
        self.draft = OrderDraft.from_order(existing) if existing else OrderDraft(table_or_name=name)
        self.item_index = 0
        self._refresh_all()

    def _rename_draft(self, name: str | None) -> None:
        if name and self.draft is not None:
            self.draft.table_or_name = name
        self._refresh_all()

    def _delete_selected_order(self) -> None:
        orders = self._list_rows()
        if not orders:
            return
        order = orders[self.list_index % len(orders)]
        self.state.orders.remove(order.id)
        self.system_status = f"Comanda excluída: {order.table_or_name}"
        self.list_index = 0

    def _custom_item_name_entered(self, name: str | None) -> None:
        if not name:
            return
        self.push_screen(
            PromptModal("Item manual", f"Preço de {name}", validate=number("Preço inválido.", allow_zero=False)),
            lambda price: self._custom_item_price_entered(name, price),
        )

    def _custom_item_price_entered(self, name: str, price: str | None) -> None:
        if price is None or self.draft is None:
            return
        try:
            self.draft.add_custom_item(name, price)
        except ValueError as exc:
            self.system_status = str(exc)
        self._refresh_all()

    def _discount_entered(self, value: str | None) -> None:
        if value is not None and self.draft is not None:
            self.draft.discount = value or None
        self._refresh_all()

    def _split_entered(self, value: str | None) -> None:
        if value and self.draft is not None:
            self.draft.set_split_count(int(value))
        self._refresh_all()

    def _barcode_entered(self, code: str | None) -> None:
        if not code or self.draft is None:
            return
        product = self.state.catalog.find_by_barcode(code)
        if product is not None:
            self.draft.add_item(product)
            self._refresh_all()
            return
        options = [(p.id, p.name) for p in self.state.catalog]
        self.push_screen(
            ChoiceModal("Código não cadastrado", options, f"Vincular {code} a qual produto?"),
            lambda product_id: self._link_and_add(code, product_id),
        )

    def _link_and_add(self, code: str, product_id: str | None) -> None:
        if not product_id or self.draft is None:
            return
        product = self.state.catalog.link_barcode(product_id, code)
        self.draft.add_item(product)
        self._refresh_all()

    def _start_closing(self) -> None:
        try:
            self.draft.to_order()
        except ValueError as exc:
            self.system_status = str(exc)
            return
        totals = self.draft.compute_totals()
        subtitle = f"Total {format_currency(totals.total)}"
        if self.draft.split_count > 1:
            subtitle += f" · {self.draft.split_count}x {format_currency(self.draft.split_value())}"
        options = [(value, label) for value, label in PAYMENT_METHOD_LABELS.items()]
        self.push_screen(ChoiceModal("Fechar conta", options, subtitle), self._payment_chosen)

    def _payment_chosen(self, method: str | None) -> None:
        if not method or self.draft is None:
            return
        if PaymentMethod(method) is not PaymentMethod.MONEY:
            self._finish_closing(PaymentMethod(method), None)
            return
        amount_check = number("Valor inválido.")
        self.push_screen(
            PromptModal(
                "Pagamento em dinheiro",
                "Valor recebido (opcional)",
                validate=lambda value: amount_check(value) if value else None,
            ),
            lambda received: self._finish_closing(PaymentMethod.MONEY, received) if received is not None else None,
        )

    def _finish_closing(self, method: PaymentMethod, received: str | None) -> None:
        if self.draft is None:
            return
        order = self.draft.to_closed_order()
        if self.state.orders.get(order.id) is None:
            self.state.orders.add(order)
        result = self.state.close_order(order, method)
        clamped = [c.name for c in result.stock_changes if c.clamped]
        self.system_status = f"Comanda fechada! +{format_currency(order.total)}"
        if received:
            self.system_status += f" · Troco: {format_currency(change_due(order.total, received))}"
        if result.stock_changes:
            self.system_status += " · Estoque atualizado."
        if clamped:
            self.system_status += f" Sem estoque: {', '.join(clamped)}"
        self.draft = None
        self.input_state = "normal"
        self._refresh_all()

    def _print_draft(self) -> None:
        try:
            order = self.draft.to_order()
            print_bill(order, self.state.settings, self.draft.split_count)
        except Exception as exc:
            logger.warning("bill_print_failed error=%r", exc)
            self.system_status = f"Falha ao imprimir: {exc}"
            return
        self.system_status = "Conta impressa"

    # ---- stock --------------------------------------------------------

    def _edit_product(self, product: Product | None) -> None:
        title = "Editar produto" if product else "Novo produto"
        self.push_screen(
            PromptModal(title, "Nome do produto", product.name if product else "", validate=required("Preencha nome e preço")),
            lambda name: self._product_name_entered(product, name),
        )

    def _product_name_entered(self, product: Product | None, name: str | None) -> None:
        if not name:
            return
        self.push_screen(
            PromptModal("Preço", f"Preço de {name}", str(product.price) if product else "", validate=number("O preço não pode ser negativo")),
            lambda price: self._product_price_entered(product, name, price),
        )

    def _product_price_entered(self, product: Product | None, name: str, price: str | None) -> None:
        if price is None:
            return
        options = [(value, label) for value, label in PRODUCT_CATEGORY_LABELS.items()]
        self.push_screen(
            ChoiceModal("Categoria", options, name),
            lambda category: self._product_category_chosen(product, name, price, category),
        )

    def _product_category_chosen(self, product: Product | None, name: str, price: str, category: str | None) -> None:
        if not category:
            return
        try:
            saved = self.state.catalog.save_product(
                name,
                price,
                category=category,
                stock=product.stock if product else 0,
                min_stock=product.min_stock if product else None,
                barcode=product.barcode if product else None,
                unit=product.unit if product else None,
                product_id=product.id if product else None,
            )
        except ValueError as exc:
            self.system_status = str(exc)
        else:
            self.system_status = f"Produto salvo: {saved.name}"
        self._refresh_all()

    def _stock_entered(self, product: Product, value: str | None) -> None:
        if value:
            self.state.catalog.set_stock(product.id, int(value))
        self._refresh_all()

    def _stock_barcode_entered(self, code: str | None) -> None:
        if not code:
            return
        product = self.state.catalog.find_by_barcode(code)
        if product is None:
            self.system_status = f"Produto com código {code} não encontrado."
        else:
            rows = self._list_rows()
            self.list_index = rows.index(product) if product in rows else 0
            self.system_status = f"Produto encontrado: {product.name}"
        self._refresh_all()

    def _link_barcode(self, product: Product, code: str | None) -> None:
        if code is not None:
            self.state.catalog.link_barcode(product.id, code)
        self._refresh_all()

    # ---- finance ------------------------------------------------------

    def _unlock_entered(self, pin: str | None) -> None:
        if pin is None:
            return
        if self.state.lock.unlock(pin):
            self.system_status = "Acesso liberado!"
        else:
            self.system_status = "PIN incorreto!"
        self._refresh_all()

    def _shift_month(self, delta: int) -> None:
        month = self.report_month + delta
        year = self.report_year
        if month < 1:
            month, year = 12, year - 1
        elif month > 12:
            month, year = 1, year + 1
        self.report_month, self.report_year = month, year
        self.analysis_text = ""
        self.list_index = 0

    def _entry_category_chosen(self, category: str | None) -> None:
        if not category:
            return
        self.push_screen(
            PromptModal("Valor", EXPENSE_CATEGORY_LABELS[category], validate=number("Por favor, insira um valor válido maior que zero.", allow_zero=False)),
            lambda amount: self._entry_amount_entered(category, amount),
        )

    def _entry_amount_entered(self, category: str, amount: str | None) -> None:
        if amount is None:
            return
        options = [(value, label) for value, label in PAYMENT_METHOD_LABELS.items()]
        self.push_screen(
            ChoiceModal("Forma de pagamento", options, format_currency(to_decimal(amount))),
            lambda method: self._entry_method_chosen(category, amount, method),
        )

    def _entry_method_chosen(self, category: str, amount: str, method: str | None) -> None:
        if method is None:
            return
        self.push_screen(
            PromptModal("Descrição", "Opcional"),
            lambda description: self._entry_description_entered(category, amount, method, description),
        )

    def _entry_description_entered(self, category: str, amount: str, method: str, description: str | None) -> None:
        if description is None:
            return
        try:
            entry = new_entry(category, amount, description, payment_method=method)
        except ValueError as exc:
            self.system_status = str(exc)
        else:
            self.state.ledger.add(entry)
            self.system_status = f"Lançamento salvo: {format_currency(entry.amount)}"
        self._refresh_all()

    def _delete_selected_entry(self) -> None:
        entries = self._list_rows()
        if not entries:
            return
        entry = entries[self.list_index % len(entries)]
        self.state.ledger.delete(entry.id)
        self.list_index = 0

    def _export_csv(self) -> None:
        entries = self.state.ledger.for_month(self.report_year, self.report_month)
        path = Path(csv_filename(self.report_year, self.report_month))
        with path.open("w", encoding="utf-8", newline="") as fh:
            count = export_csv(entries, fh)
        self.system_status = f"CSV exportado: {path} ({count} linhas)"

    def _export_backup(self) -> None:
        data = export_backup(self.state.settings, self.state.ledger, self.state.orders.orders)
        path = Path(backup_filename())
        with path.open("w", encoding="utf-8") as fh:
            dump_backup(data, fh)
        self.system_status = f"Backup salvo: {path}"

    def _restore_backup(self, path: str | None) -> None:
        if not path:
            return
        try:
            backup = import_backup(Path(path).expanduser().read_text(encoding="utf-8"))
        except (OSError, BackupError) as exc:
            self.system_status = str(exc)
        else:
            self.state.restore(backup)
            self.system_status = "Dados restaurados com sucesso!"
        self._refresh_all()

    def _prompt_pin(self) -> None:
        label = "Confirme o PIN" if self.pin_setup.confirming else "Digite 4 números"
        self.push_screen(
            PromptModal("Definir PIN", label, digits_only=True, max_length=4, secret=True),
            self._pin_entered,
        )

    def _pin_entered(self, pin: str | None) -> None:
        if pin is None:
            self.pin_setup.reset()
            return
        try:
            confirmed = self.pin_setup.submit(pin)
        except ValueError as exc:
            self.system_status = str(exc)
            self._refresh_all()
            return
        if confirmed is None:
            self._prompt_pin()
            return
        self.state.settings.security_pin = confirmed
        self.state.save_settings()
        self.state.lock.unlocked = True
        self.system_status = "PIN salvo"
        self._refresh_all()

    def _clear_confirmed(self, answer: str | None) -> None:
        if answer != "yes":
            return
        self.state.clear_data()
        self.list_index = 0
        self.system_status = "Dados apagados"
        self._refresh_all()

    def _goal_entered(self, value: str | None) -> None:
        if value:
            self.state.settings.monthly_goal = to_decimal(value)
            self.state.save_settings()
        self._refresh_all()

    def _start_analysis(self) -> None:
        # The ledger is only read on the UI thread; the worker gets a string.
        summary = summarize_month(
            self.state.ledger,
            self.report_year,
            self.report_month,
            self.state.settings.fees,
            self.state.settings.monthly_goal,
        )
        self.analysis_text = "Gerando análise..."
        self._run_analysis(analysis_data(summary))

    @work(thread=True, exclusive=True)
    def _run_analysis(self, data: str) -> None:
        try:
            text = get_monthly_analysis(data)
        except AnalysisError as exc:
            text = f"Erro na conexão com IA. Pressione i para tentar novamente. ({exc})"
        self.call_from_thread(self._analysis_done, text)


    def _analysis_done(self, text: str) -> None:
        self.analysis_text = text
        self._refresh_all()

    # ---- rendering ----------------------------------------------------

    def _list_rows(self) -> list:
        if self.view == "orders":
            return self.state.orders.closed_orders() if self.show_closed else self.state.orders.open_orders()
        if self.view == "stock":
            return self.state.catalog.sorted_products(self.stock_sort, low_only=self.stock_low_only)
        entries = self.state.ledger.for_month(self.report_year, self.report_month)
        return sorted(entries, key=lambda e: e.date, reverse=True)

    def _selected_product(self) -> Product | None:
        rows = self._list_rows()
        if not rows:
            return None
        return rows[self.list_index % len(rows)]

    def _selected_item(self):
        if self.draft is None or not self.draft.items:
            return None
        return self.draft.items[self.item_index % len(self.draft.items)]

    def _search_results(self) -> list[Product]:
        return self.state.catalog.search(self.search_text)

    def _refresh_all(self) -> None:
        if self.state is None:
            return
        try:
            list_title = self.query_one("#list-title", Static)
            list_body = self.query_one("#list-body", Static)
            detail_title = self.query_one("#detail-title", Static)
            detail_body = self.query_one("#detail-body", Static)
            status_bar = self.query_one("#status-bar", Static)
        except NoMatches:
            return

        if self.view == "orders":
            self._render_orders(list_title, list_body, detail_title, detail_body)
        elif self.view == "stock":
            self._render_stock(list_title, list_body, detail_title, detail_body)
        else:
            self._render_finance(list_title, list_body, detail_title, detail_body)
        status_bar.update(f"{self._help_line()}\n{self.system_status or 'Pronto'}")

    def _render_pointer_list(self, rows: list[Text], selected: int | None) -> Text:
        lines = Text()
        for idx, row in enumerate(rows):
            if idx > 0:
                lines.append("\n")
            lines.append("➤ " if idx == selected else "  ")
            lines.append_text(row)
        return lines

    def _render_orders(self, list_title: Static, list_body: Static, detail_title: Static, detail_body: Static) -> None:
        orders = self._list_rows()
        list_title.update("Comandas fechadas" if self.show_closed else "Comandas abertas")
        rows = [format_order_label(o, wait_time(o), o.status.value == "open" and is_long_wait(o)) for o in orders]
        selected = self.list_index % len(orders) if orders and self.draft is None else None
        list_body.update(self._render_pointer_list(rows, selected) if rows else "(nenhuma comanda)")

        if self.draft is None:
            detail_title.update("Comanda")
            detail_body.update(self._order_preview(orders[selected]) if selected is not None else "")
            return

        detail_title.update(f"Comanda: {self.draft.table_or_name}")
        content = Text()
        if self.draft.items:
            item_rows = [format_item_label(item) for item in self.draft.items]
            content.append_text(self._render_pointer_list(item_rows, self.item_index % len(self.draft.items)))
        else:
            content.append("(sem itens)", style="dim")
        content.append("\n\n")
        content.append_text(
            format_totals(
                self.draft.compute_totals(),
                self.draft.service_fee,
                self.draft.split_count,
                self.draft.split_value(),
            )
        )
        if self.input_state == "search":
            content.append(f"\n\nBuscar: {self.search_text}|\n", style="bold")
            results = self._search_results()
            if not results:
                content.append("Nenhum produto")
            result_rows = [format_product_label(p, self.draft.product_quantity(p.name)) for p in results]
            if result_rows:
                content.append_text(self._render_pointer_list(result_rows, self.result_index % len(result_rows)))
        detail_body.update(content)

    def _order_preview(self, order: Order) -> Text:
        content = Text()
        for item in order.items:
            content.append_text(format_item_label(item))
            content.append("\n")
        content.append(f"\nTotal: {format_currency(order.total)}", style="bold")
        if order.payment_method is not None:
            content.append(f"\nPagamento: {payment_label(order.payment_method)}")
        return content

    def _render_stock(self, list_title: Static, list_body: Static, detail_title: Static, detail_body: Static) -> None:
        catalog = self.state.catalog
        products = self._list_rows()
        filter_label = " · só baixo" if self.stock_low_only else ""
        list_title.update(f"Estoque ({self.stock_sort}{filter_label})")
        rows = [format_product_label(p) for p in products]
        selected = self.list_index % len(products) if products else None
        list_body.update(self._render_pointer_list(rows, selected) if rows else "(nenhum produto)")

        detail_title.update("Resumo")
        content = Text()
        content.append(f"Produtos: {len(catalog)}\n")
        content.append(f"Estoque baixo: {len(catalog.low_stock())}\n")
        content.append(f"Valor em estoque: {format_currency(catalog.stock_value())}\n")
        if selected is not None:
            product = products[selected]
            content.append(f"\n{product.name}\n", style="bold")
            content.append(f"Preço: {format_currency(product.price)}\n")
            content.append(f"Estoque: {product.stock} (mín. {product.min_stock}) ")
            content.append(stock_label(product), style=stock_style(product))
            if product.barcode:
                content.append(f"\nCódigo: {product.barcode}")
        detail_body.update(content)

    def _render_finance(self, list_title: Static, list_body: Static, detail_title: Static, detail_body: Static) -> None:
        period = f"{MONTH_NAMES[self.report_month - 1]} {self.report_year}"
        list_title.update(f"Lançamentos · {period}")
        if self.state.lock.locked:
            list_body.update("Área protegida. Pressione Enter e digite o PIN.")
            detail_title.update("Resumo")
            detail_body.update("")
            return

        entries = self._list_rows()
        rows = []
        for entry in entries:
            row = Text()
            sign, style = ("+", "#69db7c") if entry.type.value == "income" else ("-", "#ff6b6b")
            row.append(f"{format_date_display(entry.date)}  ")
            row.append(f"{sign}{format_currency(entry.amount)}", style=style)
            row.append(f"  {entry.description or entry.category.value}")
            rows.append(row)
        selected = self.list_index % len(entries) if entries else None
        list_body.update(self._render_pointer_list(rows, selected) if rows else "(sem lançamentos)")

        settings = self.state.settings
        summary = summarize_month(self.state.ledger, self.report_year, self.report_month, settings.fees, settings.monthly_goal)
        detail_title.update("Resumo do mês")
        content = Text()
        content.append(f"Receita: {format_currency(summary.total_income)}\n", style="#69db7c")
        content.append(f"Despesas: {format_currency(summary.total_expenses)}\n", style="#ff6b6b")
        content.append(f"Saldo: {format_currency(summary.net_balance)}\n", style="bold")
        content.append(f"Caixa (físico): {format_currency(summary.cash_balance)}\n")
        content.append(f"Taxas estimadas: {format_currency(summary.estimated_fees)}\n")
        content.append(f"Meta: {summary.goal_percent:.0f}% de {format_currency(settings.monthly_goal)}\n")
        for method, amount in summary.by_payment_method:
            content.append(f"  {payment_label(method)}: {format_currency(amount)}\n")
        for category, amount in summary.by_category[:4]:
            content.append(f"  {EXPENSE_CATEGORY_LABELS[category.value]}: {format_currency(amount)}\n")
        if self.analysis_text:
            content.append(f"\n{self.analysis_text}")
        detail_body.update(content)

    def _help_line(self) -> str:
        if self.view == "orders":
            if self.input_state == "search":
                return "Digite para buscar. ↑/↓ escolher, Enter adicionar, Esc sair."
            if self.draft is not None:
                return "/ buscar  a manual  b código  +/- qtd  d remover  e entregue  g cortesia  t taxa  o desconto  p dividir  f fechar  r imprimir  Ctrl+S salvar"
            return "F1 Comandas  F2 Estoque  F3 Financeiro · n nova  Enter abrir  x excluir  c abertas/fechadas"
        if self.view == "stock":
            return "+/- ajustar  Enter quantidade  n novo  e editar  x excluir  b buscar código  c vincular código  l baixo  o ordenar"
        if self.state.lock.locked:
            return "Enter desbloquear"
        return "[ ] mês  a lançar  x excluir  v CSV  i análise IA  B backup  R restaurar  P PIN  U remover PIN  G meta  X limpar"
