#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Example Simpson's Paradox Workflow
This script walks through detection on the kidney stone table, a synthetic
dataset with a continuous confounder, and a full per-factor analysis.
"""

# %% [markdown]
# # Example Simpson's Paradox Workflow
#
# - **Kidney stones**: the textbook paradox with a categorical factor
# - **Continuous factor**: the factor is clustered and the elbow picks k
# - **Full analysis**: every other column is tried as the confounder

# %% [setup]
import os
import sys
import logging
import matplotlib.pyplot as plt
from pathlib import Path

# Auto-detect working directory and adjust paths accordingly
current_dir = Path.cwd()
if current_dir.name == 'notebooks':
    base_dir = current_dir.parent
    os.chdir(base_dir)
    print(f"Detected notebook execution. Changed working directory to: {base_dir}")
else:
    base_dir = current_dir
    print(f"Detected script execution from: {base_dir}")

# Add package to path
sys.path.append(str(base_dir))

from simpsons_package import (
    AnalysisSettings,
    detect_simpsons_paradox,
    make_kidney_stone_data,
    make_paradox_data,
    plot_elbow,
    plot_factor_grouping,
    simpsons_analysis,
)

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

# Control figure display - set to True if you want to see figures inline
if hasattr(sys, 'ps1') or 'ipykernel' in sys.modules or 'IPython' in sys.modules:
    SHOW_FIGURES = True
else:
    SHOW_FIGURES = False

output_dir = base_dir / 'output'
output_dir.mkdir(exist_ok=True)

print("=" * 65)

# %% [markdown]
# ## 1. Kidney stones

# %% [kidney]
print("\n🩺 KIDNEY STONE TREATMENTS")
kidney_df = make_kidney_stone_data()
kidney_report = detect_simpsons_paradox(kidney_df, "Atreatment", "recovery", "kidney_stone_size")
print(kidney_report.to_frame())

fig = plot_factor_grouping(kidney_df, kidney_report)
fig.savefig(output_dir / 'kidney_grouping.png', dpi=120)
if SHOW_FIGURES:
    plt.show()

# %% [markdown]
# ## 2. Continuous confounder

# %% [continuous]
print("\n📈 SYNTHETIC DATA WITH A CONTINUOUS FACTOR")
synthetic_df, triple = make_paradox_data(
    n_groups=4, cause_column="dose", effect_column="response", factor_column="age",
    continuous_factor=True, random_state=42,
)
synthetic_report = detect_simpsons_paradox(synthetic_df, *triple, random_state=42)
elbow = synthetic_report.grouping.elbow
print(f"Elbow chose k={elbow.k} (elbow_k={elbow.elbow_k}, min_cost_k={elbow.min_cost_k})")

plot_elbow(elbow).savefig(output_dir / 'synthetic_elbow.png', dpi=120)
plot_factor_grouping(synthetic_df, synthetic_report).savefig(output_dir / 'synthetic_grouping.png', dpi=120)
if SHOW_FIGURES:
    plt.show()

# %% [markdown]
# ## 3. Every column as a factor

# %% [analysis]
print("\n🔍 FULL ANALYSIS")
summary = simpsons_analysis(
    synthetic_df.assign(site=(synthetic_df.index % 3).astype(str)),
    "dose", "response",
    show_plots=SHOW_FIGURES,
    settings=AnalysisSettings(verbose=False, random_state=42),
)
print(summary.summary_df)
print(summary.narrative)
