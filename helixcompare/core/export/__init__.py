from .csv_writer import CSV_COLUMNS, CSV_HEADERS, offer_to_csv_values, to_csv_line, write_offers_csv

__all__ = ["CSV_COLUMNS", "CSV_HEADERS", "offer_to_csv_values", "to_csv_line", "write_offers_csv"]
