"""
Application Configuration
=========================
Configuration management for the Excel sales analyzer.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass
class AppConfig:
    """
    Application configuration.
    
    Attributes:
        data_dir: Directory for application data (logs, etc.)
        log_file: Log file used by the TUI (defaults to data_dir/excel_analyzer.log)
        log_level: Root logging level name
        output_suffix: Suffix appended to the input stem for the analyzed workbook
        min_history_days: Days of sales history the daily report requires
        customer_min_quantity: Latest-day product total needed for the customer sheet
        style_min_latest_quantity: Latest-day product total needed for the style sheets
        style_customer_min_total: Customer total needed in the style+customer sheet
        date_formats: Accepted text formats for the date column
    """
    
    # Directories
    data_dir: Path = field(default_factory=lambda: Path("data"))
    log_file: Optional[Path] = None
    log_level: str = "INFO"
    
    # Output
    output_suffix: str = "_analyzed"
    
    # Report thresholds
    min_history_days: int = 7
    customer_min_quantity: int = 10
    style_min_latest_quantity: int = 10
    style_customer_min_total: int = 20
    
    # Input parsing
    date_formats: tuple[str, ...] = (
        "%m/%d/%y %H:%M",
        "%Y-%m-%d %H:%M:%S",
        "%Y-%m-%d",
    )
    
    def __post_init__(self):
        """Ensure directories exist and set defaults."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        
        if self.log_file is None:
            self.log_file = self.data_dir / "excel_analyzer.log"
    
    @classmethod
    def from_dict(cls, config_dict: dict) -> "AppConfig":
        """
        Create config from dictionary.
        
        Args:
            config_dict: Configuration dictionary
            
        Returns:
            AppConfig instance
        """
        path_fields = {"data_dir", "log_file"}
        processed = {}
        
        for key, value in config_dict.items():
            if key in path_fields and value is not None:
                processed[key] = Path(value)
            elif key == "date_formats":
                processed[key] = tuple(value)
            else:
                processed[key] = value
        
        return cls(**processed)
    
    def to_dict(self) -> dict:
        """
        Convert config to dictionary.
        
        Returns:
            Configuration dictionary
        """
        return {
            "data_dir": str(self.data_dir),
            "log_file": str(self.log_file) if self.log_file else None,
            "log_level": self.log_level,
            "output_suffix": self.output_suffix,
            "min_history_days": self.min_history_days,
            "customer_min_quantity": self.customer_min_quantity,
            "style_min_latest_quantity": self.style_min_latest_quantity,
            "style_customer_min_total": self.style_customer_min_total,
            "date_formats": list(self.date_formats),
        }
