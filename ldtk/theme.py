"""CSS themes for the LDTK configurator."""

DARK = """
<style>
html, body, [class*="css"]  {
    font-family: Arial, "Segoe UI", Roboto, sans-serif;
    background-color: #121212;
    color: #ffffff;
}
.stApp { background: #121212; }

/* Input controls */
div[data-baseweb="select"] > div,
input[type="text"] {
    background-color: #1e1e1e;
    border: 1px solid #3a3a3a;
    border-radius: 8px;
    color: #ffffff;
}

/* Buttons */
.stButton>button, .stDownloadButton>button {
    background-color: #ff6b6b;
    color: #121212;
    border: none;
    border-radius: 8px;
    padding: 8px 16px;
    font-weight: 600;
}

/* Slider accent */
div[data-baseweb="slider"] [role="slider"] {
    background-color: #ff6b6b;
}

.app-title { color: #ff6b6b; text-align: center; font-weight: 700; }
.result-card { background: rgba(25, 118, 210, 0.15); border: 2px solid #90caf9; border-radius: 12px; padding: 24px; text-align: center; }
.result-tube { color: #90caf9; font-size: 2.4rem; font-weight: 800; }
.result-screw { color: #ef5350; font-size: 1.8rem; font-weight: 500; }
.step-dot { background: #3a3a3a; }
.step-dot.active { background: #ff6b6b; }
</style>
"""

LIGHT = """
<style>
html, body, [class*="css"]  {
    font-family: Arial, "Segoe UI", Roboto, sans-serif;
    background-color: #f5f5f5;
    color: #333333;
}
.stApp { background: #f5f5f5; }

/* Input controls */
div[data-baseweb="select"] > div,
input[type="text"] {
    background-color: #ffffff;
    border: 1px solid #d0d0d0;
    border-radius: 8px;
    color: #333333;
}

/* Buttons */
.stButton>button, .stDownloadButton>button {
    background-color: #dd0000;
    color: white;
    border: none;
    border-radius: 8px;
    padding: 8px 16px;
    font-weight: 600;
}

/* Slider accent */
div[data-baseweb="slider"] [role="slider"] {
    background-color: #dd0000;
}

.app-title { color: #dd0000; text-align: center; font-weight: 700; }
.result-card { background: #e3f2fd; border: 2px solid #1976d2; border-radius: 12px; padding: 24px; text-align: center; }
.result-tube { color: #1565c0; font-size: 2.4rem; font-weight: 800; }
.result-screw { color: #d32f2f; font-size: 1.8rem; font-weight: 500; }
.step-dot { background: #e0e0e0; }
.step-dot.active { background: #dd0000; }
</style>
"""

THEMES = {"dark": DARK, "light": LIGHT}
