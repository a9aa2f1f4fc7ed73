import os


class Config:
    # Report identity
    APP_VERSION = os.getenv('REPORT_APP_VERSION', '1.0.0')
    PRODUCT_NAME = os.getenv('REPORT_PRODUCT_NAME', 'Monitor Mate')
    FILE_LABEL = os.getenv('REPORT_FILE_LABEL', 'MobileMonitor')

    # Locations (empty OUTPUT_DIR means the host platform default)
    OUTPUT_DIR = os.getenv('REPORT_OUTPUT_DIR', '')
    STORE_DIR = os.getenv('REPORT_STORE_DIR', os.path.join(os.path.expanduser('~'), '.mobile_monitor'))

    # Optional TTF fonts, Helvetica is used when unset
    FONT_PATH = os.getenv('REPORT_FONT_PATH', '')
    FONT_BOLD_PATH = os.getenv('REPORT_FONT_BOLD_PATH', '')

    TOP_RISK_LIMIT = int(os.getenv('REPORT_TOP_RISK_LIMIT', '10'))

    LOG_LEVEL = os.getenv('REPORT_LOG_LEVEL', 'INFO')
