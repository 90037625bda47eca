import numpy as np
import matplotlib.pyplot as plt
from mpl_toolkits.mplot3d.art3d import Line3DCollection

def plot_segments(segments, image_filename='segment_plot.png'):

    assert len(segments.shape) == 3 and segments.shape[1:] == (2, 3)

    lc = Line3DCollection(segments, colors='b', linewidths=0.5)

    fig = plt.figure()
    ax = fig.add_subplot(projection='3d')

    ax.add_collection3d(lc)

    # same scale on every axis so shapes aren't stretched
    if len(segments):
        points = segments.reshape(-1, 3)
        lo = points.min(axis=0)
        hi = points.max(axis=0)
        center = 0.5 * (lo + hi)
        radius = max(0.5 * (hi - lo).max(), 1e-3)
        ax.set_xlim(center[0] - radius, center[0] + radius)
        ax.set_ylim(center[1] - radius, center[1] + radius)
        ax.set_zlim(center[2] - radius, center[2] + radius)

    # look along -Z so flat systems show up the right way round
    ax.view_init(elev=90, azim=-90)
    ax.set_axis_off()

    fig.savefig(image_filename)
    plt.close(fig)
    print('wrote', image_filename)


if __name__ == '__main__':

    segments = np.genfromtxt('segments.txt').reshape(-1, 2, 3)

    plot_segments(segments)
