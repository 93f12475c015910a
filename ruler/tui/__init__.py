from ruler.tui.renderers import ConversionConsoleUI

__all__ = ["ConversionConsoleUI"]
