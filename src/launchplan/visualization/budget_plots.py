"""
Plotting utilities for mission plans.
Delta-V budget chart: stacked requirement legs next to base and final
vehicle capability, coloured by feasibility.
"""

import logging
import os

import numpy as np
import matplotlib
matplotlib.use('Agg')  # Non-interactive backend for saving
import matplotlib.pyplot as plt

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# PlotStyle -- shared styling helpers
# ---------------------------------------------------------------------------

class PlotStyle:
    """Shared colours and figure helpers for plan plots."""

    COLORS = {
        'ascent': '#2E86AB',       # Steel blue
        'transfer': '#F18F01',     # Orange
        'capture': '#A23B72',      # Magenta
        'base': '#546E7A',         # Blue grey
        'success': '#2E7D32',      # Green
        'failure': '#C73E1D',      # Red
    }

    @staticmethod
    def setup_style():
        """Set matplotlib rcParams for clean report figures."""
        plt.rcParams.update({
            'font.family': 'sans-serif',
            'font.size': 11,
            'axes.titlesize': 14,
            'axes.titleweight': 'bold',
            'axes.grid': True,
            'axes.axisbelow': True,
            'axes.spines.top': False,
            'axes.spines.right': False,
            'grid.color': '#E0E0E0',
            'grid.linewidth': 0.5,
            'savefig.facecolor': 'white',
        })

    @staticmethod
    def save_figure(fig, filepath, dpi=150):
        """Save *fig* to *filepath*, creating directories as needed."""
        directory = os.path.dirname(str(filepath))
        if directory:
            os.makedirs(directory, exist_ok=True)
        fig.tight_layout()
        fig.savefig(filepath, dpi=dpi, bbox_inches='tight',
                    facecolor='white', edgecolor='none')
        plt.close(fig)


def plot_budget(plan, filepath):
    """Bar chart of the delta-V budget against vehicle capability.

    Parameters
    ----------
    plan : MissionPlan
    filepath : str or Path
        Output image path (format from the extension, e.g. .png).

    Returns
    -------
    filepath : same as input
    """
    budget, res = plan.budget, plan.result
    PlotStyle.setup_style()
    fig, ax = plt.subplots(figsize=(8, 6))

    x = np.arange(3)
    width = 0.6
    c = PlotStyle.COLORS

    # Stacked requirement legs
    bottom = 0.0
    for leg, value in (('ascent', budget.ascent),
                       ('transfer', budget.transfer),
                       ('capture', budget.capture)):
        ax.bar(x[0], value, width, bottom=bottom, color=c[leg],
               edgecolor='black', linewidth=0.5, label=leg.capitalize())
        bottom += value

    final_colour = c['success'] if res.feasible else c['failure']
    bars = ax.bar(x[1:], [res.base_capability, res.final_capability], width,
                  color=[c['base'], final_colour], edgecolor='black', linewidth=0.5)

    ax.axhline(budget.total, color='black', linestyle='--', linewidth=1.0)
    for bar, dv in zip(bars, (res.base_capability, res.final_capability)):
        ax.text(bar.get_x() + bar.get_width() / 2, bar.get_height() + 0.1,
                f'{dv:.2f}', ha='center', va='bottom', fontsize=10)
    ax.text(x[0], budget.total + 0.1, f'{budget.total:.2f}',
            ha='center', va='bottom', fontsize=10)

    ax.set_xticks(x)
    ax.set_xticklabels(['Required', 'Base capability',
                        f'Final ({res.strategy.label})'])
    ax.set_ylabel('Delta-V [km/s]')
    ax.set_title(f'{plan.request.vehicle.name} -> {plan.request.body.name}')
    ax.legend(loc='upper left')

    PlotStyle.save_figure(fig, filepath)
    logger.info("Saved delta-V budget plot to %s", filepath)
    return filepath
